"""
Signing Checker

Verifies that every commit of a pull request carries a sign-off.
"""

import re
import logging
from typing import Dict, Iterable


logger = logging.getLogger(__name__)


SIGNED_OFF_PATTERN = re.compile(r'^Signed-off-by: .+ <[^<>@\s]+@[^<>\s]+>\s*$', re.MULTILINE)


class SigningChecker:
    """
    Checks the ``Signed-off-by`` trailer of pull request commits.

    Commits are GitHub API commit documents, as returned by
    ``GitHubClient.get_pull_request_commits``.
    """

    def __init__(self, accept_verified_signatures: bool = False):
        """
        Initialize signing checker.

        Args:
            accept_verified_signatures: Also accept commits whose GPG/SSH
                signature GitHub reports as verified
        """
        self.accept_verified_signatures = accept_verified_signatures

    def commits_are_signed(self, commits: Iterable[Dict]) -> bool:
        """
        Check every commit in range.

        Args:
            commits: Commit documents of the pull request

        Returns:
            True if all commits are signed (trivially True for no commits)
        """
        for commit in commits:
            if not self.is_signed(commit):
                logger.debug(f"Commit {commit.get('sha', '?')} is not signed")
                return False
        return True

    def is_signed(self, commit: Dict) -> bool:
        details = commit.get('commit') or {}
        message = details.get('message') or ''
        if SIGNED_OFF_PATTERN.search(message):
            return True

        if self.accept_verified_signatures:
            verification = details.get('verification') or {}
            return bool(verification.get('verified'))

        return False
