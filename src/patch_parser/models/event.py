"""
Pull Request Event Models

웹훅 페이로드 스키마와 디코딩된 Pull Request 이벤트
"""

from dataclasses import dataclass
from typing import Optional
from pydantic import BaseModel


# Pydantic models for webhook validation
class OwnerPayload(BaseModel):
    """저장소 소유자"""
    login: str


class RepositoryPayload(BaseModel):
    """웹훅/API 저장소 정보"""
    name: str
    owner: OwnerPayload
    clone_url: str = ""
    html_url: str = ""
    ssh_url: str = ""


class BranchPayload(BaseModel):
    """base/head 브랜치 정보"""
    ref: str
    # 포크가 삭제된 경우 head.repo 는 null
    repo: Optional[RepositoryPayload] = None


class PullRequestPayload(BaseModel):
    """Pull Request 본문 (웹훅 및 REST API 공통)"""
    number: int
    title: str
    url: str
    commits: int = 0
    base: BranchPayload
    head: BranchPayload


class PullRequestHookPayload(BaseModel):
    """pull_request 웹훅 이벤트"""
    action: str
    number: int
    pull_request: PullRequestPayload


@dataclass(frozen=True)
class PullRequestEvent:
    """디코딩된 Pull Request 이벤트"""
    action: str
    number: int
    title: str
    url: str
    base_owner: str
    base_name: str
    base_clone_url: str
    base_html_url: str
    head_ref: str
    head_clone_url: str
    head_ssh_url: str
    commits: int

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("PR number must be positive")
        if self.commits < 0:
            raise ValueError("Commit count must be non-negative")

    @classmethod
    def from_payload(cls, action: str, pull_request: PullRequestPayload) -> "PullRequestEvent":
        """웹훅/API 페이로드에서 이벤트 생성"""
        base_repo = pull_request.base.repo
        if base_repo is None:
            raise ValueError("Pull request has no base repository")
        head_repo = pull_request.head.repo

        return cls(
            action=action,
            number=pull_request.number,
            title=pull_request.title,
            url=pull_request.url,
            base_owner=base_repo.owner.login,
            base_name=base_repo.name,
            base_clone_url=base_repo.clone_url,
            base_html_url=base_repo.html_url,
            head_ref=pull_request.head.ref,
            head_clone_url=head_repo.clone_url if head_repo else "",
            head_ssh_url=head_repo.ssh_url if head_repo else "",
            commits=pull_request.commits,
        )

    @property
    def repository(self) -> str:
        """owner/repo 형식의 저장소 이름"""
        return f"{self.base_owner}/{self.base_name}"

    @property
    def is_opened(self) -> bool:
        """새로 열린 PR 여부"""
        return self.action == "opened"
