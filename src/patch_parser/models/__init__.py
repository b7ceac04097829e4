"""
Data Models

patch-parser 워커의 핵심 데이터 모델들
"""

from .event import (
    PullRequestEvent,
    PullRequestHookPayload,
    PullRequestPayload,
    RepositoryPayload,
    BranchPayload,
    OwnerPayload,
)
from .review import Label, ReviewOutcome, WorkingCopy, FormatReport

__all__ = [
    "PullRequestEvent",
    "PullRequestHookPayload",
    "PullRequestPayload",
    "RepositoryPayload",
    "BranchPayload",
    "OwnerPayload",
    "Label",
    "ReviewOutcome",
    "WorkingCopy",
    "FormatReport",
]
