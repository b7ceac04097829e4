"""
Format Checker

Compares the files a pull request touches against a canonical formatter.
Only changed files are inspected; violations keep the pull request's
changed-file order.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence, Tuple

import black

from ..models.review import FormatReport, WorkingCopy


logger = logging.getLogger(__name__)


class FormatChecker(ABC):
    """
    Base class for formatting checks.

    Subclasses declare the extensions they handle and decide whether a
    single file is canonically formatted.
    """

    extensions: Tuple[str, ...] = ()
    fix_command: str = ""

    def check(self, working_copy: WorkingCopy, changed_files: Sequence[str]) -> FormatReport:
        """
        Check the changed files of a pull request.

        Args:
            working_copy: Checkout with the pull request merged
            changed_files: Paths changed by the pull request, in diff order

        Returns:
            FormatReport listing the unformatted paths
        """
        violations: List[str] = []

        for file_path in changed_files:
            if not self.applies_to(file_path):
                continue

            full_path = working_copy.resolve(file_path)
            if not full_path.is_file():
                # removed by the pull request
                continue

            if not self.is_formatted(full_path):
                violations.append(file_path)

        logger.info(f"Format check of PR {working_copy.pr_number}: {len(violations)} unformatted files")
        return FormatReport(violations=tuple(violations), fix_command=self.fix_command)

    def applies_to(self, file_path: str) -> bool:
        return file_path.endswith(self.extensions)

    @abstractmethod
    def is_formatted(self, path: Path) -> bool:
        """Return True if the file already is in canonical format."""
        ...


class GofmtChecker(FormatChecker):
    """Checks Go sources with ``gofmt -s``."""

    extensions = (".go",)
    fix_command = "gofmt -s -w"

    def __init__(self, gofmt_binary: str = "gofmt"):
        self.gofmt_binary = gofmt_binary

    def is_formatted(self, path: Path) -> bool:
        # OSError (gofmt missing) propagates as a processing failure
        result = subprocess.run(
            [self.gofmt_binary, "-s", "-l", str(path)],
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            logger.debug(f"gofmt failed on {path}: {result.stderr.strip()}")
            return False
        return not result.stdout.strip()


class BlackChecker(FormatChecker):
    """Checks Python sources with black."""

    extensions = (".py", ".pyi")
    fix_command = "black"

    def __init__(self, line_length: int = black.DEFAULT_LINE_LENGTH):
        self.line_length = line_length

    def is_formatted(self, path: Path) -> bool:
        try:
            source = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.debug(f"{path} is not valid UTF-8")
            return False

        mode = black.Mode(line_length=self.line_length, is_pyi=path.suffix == ".pyi")
        try:
            formatted = black.format_str(source, mode=mode)
        except black.InvalidInput as e:
            logger.debug(f"black cannot parse {path}: {e}")
            return False

        return formatted == source


def build_format_checker(name: str) -> FormatChecker:
    """Create the format checker selected by configuration."""
    checkers = {
        'gofmt': GofmtChecker,
        'black': BlackChecker,
    }
    if name not in checkers:
        raise ValueError(f"Unknown formatter: {name}")
    return checkers[name]()
