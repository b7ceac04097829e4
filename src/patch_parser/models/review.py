"""
Review Data Models

PR 검사 결과 관련 데이터 모델들
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple


class Label(Enum):
    """PR 분류 라벨 (상호 배타적)"""
    DESIGN_REVIEW = "design-review"
    DOCS_REVIEW = "docs-review"
    TRIAGE = "triage"


class ReviewOutcome(Enum):
    """파이프라인 처리 결과"""
    SKIPPED = "skipped"
    COMPLETED = "completed"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class WorkingCopy:
    """PR 브랜치가 병합된 임시 작업 사본"""
    path: Path
    pr_number: int
    base_url: str

    def resolve(self, file_path: str) -> Path:
        """저장소 상대 경로를 작업 사본 경로로 변환"""
        return self.path / file_path


@dataclass(frozen=True)
class FormatReport:
    """포맷 검사 결과"""
    violations: Tuple[str, ...] = ()
    fix_command: str = ""

    @property
    def compliant(self) -> bool:
        """모든 파일이 포맷 기준을 만족하는지 확인"""
        return not self.violations
