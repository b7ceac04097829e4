"""
Command Line Entry Point

Parses process flags, configures logging and starts the queue consumer.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import AppConfig, configure_logging
from .consumer import QueueConsumer, QueueStartupError
from .pipeline import ReviewPipeline


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patch-parser",
        description="Label and check newly opened GitHub pull requests from an NSQ topic.",
    )
    parser.add_argument("-v", "--version", action="store_true", help="print version and exit")
    parser.add_argument("-d", "--debug", action="store_true", help="run in debug mode")
    parser.add_argument("--lookupd-addr", help="nsq lookupd address (default: nsqlookupd:4161)")
    parser.add_argument("--topic", help="nsq topic (default: hooks-docker)")
    parser.add_argument("--channel", help="nsq channel (default: patch-parser)")
    parser.add_argument("--gh-token", help="github access token")
    parser.add_argument("--config", help="YAML configuration file (overrides environment)")
    return parser


def load_config(args: argparse.Namespace) -> AppConfig:
    """Environment, then YAML file, then command line flags."""
    config = AppConfig.from_yaml(args.config) if args.config else AppConfig.from_env()
    return config.with_overrides(
        lookupd_addr=args.lookupd_addr,
        topic=args.topic,
        channel=args.channel,
        token=args.gh_token,
        debug=args.debug,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"v{__version__}")
        return 0

    try:
        config = load_config(args)
        config.validate()
        configure_logging(config.logging, debug=config.debug)
    except (OSError, ValueError, TypeError) as e:
        logging.basicConfig()
        logger.critical(f"Invalid configuration: {e}")
        return 1

    try:
        consumer = QueueConsumer(ReviewPipeline.from_config(config), config.queue)
        consumer.run()
    except QueueStartupError as e:
        logger.critical(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
