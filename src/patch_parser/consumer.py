"""
Queue Consumer

Binds the review pipeline to an NSQ topic/channel. The pipeline runs on a
worker thread so the IOLoop keeps answering nsqd heartbeats; when it
returns the message is finished, when it raises the message is requeued.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import Optional

import nsq
from tornado.ioloop import IOLoop, PeriodicCallback

from .config import QueueConfig
from .pipeline import ReviewPipeline


logger = logging.getLogger(__name__)


class QueueStartupError(Exception):
    """The queue subscription could not be established"""


class QueueConsumer:
    """
    NSQ message handler around a ReviewPipeline.

    Redelivery after a failure is at-least-once; side effects of an
    earlier attempt are not undone or deduplicated.
    """

    def __init__(
        self,
        pipeline: ReviewPipeline,
        config: QueueConfig,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.pipeline = pipeline
        self.config = config
        self.executor = executor or ThreadPoolExecutor(
            max_workers=config.max_in_flight,
            thread_name_prefix="patch-parser",
        )
        self.reader: Optional[nsq.Reader] = None

    def handle_message(self, message: nsq.Message) -> None:
        """
        pynsq message handler.

        Hands the message to a worker thread and returns immediately; the
        message is answered from the IOLoop once processing is done.
        """
        logger.debug(f"Received message {message.id} (attempt {message.attempts})")

        message.enable_async()
        touch = PeriodicCallback(message.touch, self.config.touch_interval_seconds * 1000)
        touch.start()

        future = self.executor.submit(self.pipeline.process, message.body)
        IOLoop.current().add_future(future, partial(self._on_processed, message, touch))

    def _on_processed(self, message: nsq.Message, touch: PeriodicCallback, future: Future) -> None:
        touch.stop()

        error = future.exception()
        if error is not None:
            logger.error(f"Processing message {message.id} failed: {error}", exc_info=error)
            message.requeue()
            return

        logger.debug(f"Message {message.id} processed: {future.result().value}")
        message.finish()

    def subscribe(self) -> nsq.Reader:
        """Create the reader for the configured topic and channel."""
        try:
            self.reader = nsq.Reader(
                topic=self.config.topic,
                channel=self.config.channel,
                message_handler=self.handle_message,
                lookupd_http_addresses=[self.config.lookupd_addr],
                max_in_flight=self.config.max_in_flight,
                max_tries=self.config.max_tries,
            )
        except (AssertionError, ValueError, TypeError) as e:
            raise QueueStartupError(f"Cannot subscribe to {self.config.topic}/{self.config.channel}: {e}") from e

        logger.info(
            f"Subscribed to {self.config.topic}/{self.config.channel} via {self.config.lookupd_addr}"
        )
        return self.reader

    def run(self) -> None:
        """Subscribe and block in the NSQ event loop."""
        self.subscribe()
        try:
            nsq.run()
        finally:
            self.executor.shutdown(wait=True)
