"""
Configuration Management

워커 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, List
from pathlib import Path
import logging


DEFAULT_DOC_PATTERNS = ["*.md", "docs/*", "*.txt", "AUTHORS"]


@dataclass
class QueueConfig:
    """NSQ 구독 설정"""
    lookupd_addr: str = "nsqlookupd:4161"
    topic: str = "hooks-docker"
    channel: str = "patch-parser"
    max_in_flight: int = 1
    max_tries: int = 5
    touch_interval_seconds: float = 30.0


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30


@dataclass
class ReviewConfig:
    """PR 검사 설정"""
    design_review_label: str = "1-design-review"
    docs_review_label: str = "3-docs-review"
    triage_label: str = "0-triage"
    label_delay_seconds: float = 30.0
    doc_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_DOC_PATTERNS))
    formatter: str = "gofmt"
    accept_verified_signatures: bool = False
    work_root: Optional[str] = None
    contributing_url: str = "https://github.com/docker/docker/blob/master/CONTRIBUTING.md#sign-your-work"


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    queue: QueueConfig = field(default_factory=QueueConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        doc_patterns = os.getenv("DOC_PATTERNS")
        return cls(
            queue=QueueConfig(
                lookupd_addr=os.getenv("NSQ_LOOKUPD_ADDR", "nsqlookupd:4161"),
                topic=os.getenv("NSQ_TOPIC", "hooks-docker"),
                channel=os.getenv("NSQ_CHANNEL", "patch-parser"),
                max_in_flight=int(os.getenv("NSQ_MAX_IN_FLIGHT", "1")),
                max_tries=int(os.getenv("NSQ_MAX_TRIES", "5")),
                touch_interval_seconds=float(os.getenv("NSQ_TOUCH_INTERVAL", "30")),
            ),
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
            ),
            review=ReviewConfig(
                design_review_label=os.getenv("DESIGN_REVIEW_LABEL", "1-design-review"),
                docs_review_label=os.getenv("DOCS_REVIEW_LABEL", "3-docs-review"),
                triage_label=os.getenv("TRIAGE_LABEL", "0-triage"),
                label_delay_seconds=float(os.getenv("LABEL_DELAY_SECONDS", "30")),
                doc_patterns=doc_patterns.split(",") if doc_patterns else list(DEFAULT_DOC_PATTERNS),
                formatter=os.getenv("FORMATTER", "gofmt"),
                accept_verified_signatures=os.getenv("ACCEPT_VERIFIED_SIGNATURES", "false").lower() == "true",
                work_root=os.getenv("WORK_ROOT"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid config file {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ValueError(f"Invalid config file {config_path}: top level must be a mapping")

        return cls(
            queue=QueueConfig(**config_data.get('queue', {})),
            github=GitHubConfig(**config_data.get('github', {})),
            review=ReviewConfig(**config_data.get('review', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def with_overrides(
        self,
        lookupd_addr: Optional[str] = None,
        topic: Optional[str] = None,
        channel: Optional[str] = None,
        token: Optional[str] = None,
        debug: bool = False,
    ) -> "AppConfig":
        """명령행 인자로 덮어쓴 새 설정 반환"""
        queue = replace(
            self.queue,
            lookupd_addr=lookupd_addr or self.queue.lookupd_addr,
            topic=topic or self.queue.topic,
            channel=channel or self.queue.channel,
        )
        github = replace(self.github, token=token or self.github.token)
        return replace(
            self,
            queue=queue,
            github=github,
            debug=self.debug or debug,
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # GitHub 토큰 필수 확인
        if not self.github.token:
            errors.append("GitHub token is required")

        if not self.queue.lookupd_addr:
            errors.append("NSQ lookupd address is required")
        if not self.queue.topic or not self.queue.channel:
            errors.append("NSQ topic and channel are required")
        if self.queue.max_in_flight <= 0:
            errors.append("max_in_flight must be positive")
        if self.queue.touch_interval_seconds <= 0:
            errors.append("touch_interval_seconds must be positive")

        if self.review.label_delay_seconds < 0:
            errors.append("Label delay must be non-negative")

        if self.review.formatter not in {'gofmt', 'black'}:
            errors.append(f"Unknown formatter: {self.review.formatter}")

        if self.review.work_root and not Path(self.review.work_root).is_dir():
            errors.append(f"Work root does not exist: {self.review.work_root}")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'queue': {
                'lookupd_addr': self.queue.lookupd_addr,
                'topic': self.queue.topic,
                'channel': self.queue.channel,
                'max_in_flight': self.queue.max_in_flight,
                'max_tries': self.queue.max_tries,
                'touch_interval_seconds': self.queue.touch_interval_seconds,
            },
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'review': {
                'design_review_label': self.review.design_review_label,
                'docs_review_label': self.review.docs_review_label,
                'triage_label': self.review.triage_label,
                'label_delay_seconds': self.review.label_delay_seconds,
                'doc_patterns': list(self.review.doc_patterns),
                'formatter': self.review.formatter,
                'accept_verified_signatures': self.review.accept_verified_signatures,
                'work_root': self.review.work_root,
                'contributing_url': self.review.contributing_url,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


def configure_logging(config: LoggingConfig, debug: bool = False) -> None:
    """로깅 설정"""
    level = logging.DEBUG if debug else getattr(logging, config.level.upper())
    logging.basicConfig(level=level, format=config.format)

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        from logging.handlers import RotatingFileHandler

        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))

        # 루트 로거에 핸들러 추가
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
