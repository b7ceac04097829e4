"""
Git Working Copy Manager

Materialises a disposable clone of the base repository with the pull
request merged in. The clone lives in its own temporary directory that is
removed when the checkout context exits, whatever the outcome.
"""

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from git import Repo
from git.exc import GitCommandError

from ..models.review import WorkingCopy


logger = logging.getLogger(__name__)


class WorkspaceError(Exception):
    """Working copy related errors"""


class CheckoutError(WorkspaceError):
    """Clone, fetch or merge failed for a reason other than a conflict"""


class MergeConflictError(WorkspaceError):
    """The pull request does not merge cleanly into its base"""
    def __init__(self, pr_number: int, details: str = ""):
        super().__init__(f"PR {pr_number} has merge conflicts")
        self.pr_number = pr_number
        self.details = details


class WorkingCopyManager:
    """
    Creates working copies of a repository with a pull request merged.

    Each call to ``checkout`` owns its own directory, so concurrent workers
    never share state.
    """

    def __init__(
        self,
        work_root: Optional[str] = None,
        committer_name: str = "patch-parser",
        committer_email: str = "patch-parser@localhost",
    ):
        """
        Initialize the manager.

        Args:
            work_root: Parent directory for temporary clones (system default if None)
            committer_name: Identity recorded on the local merge commit
            committer_email: Identity recorded on the local merge commit
        """
        self.work_root = work_root
        self.committer_name = committer_name
        self.committer_email = committer_email

    @contextmanager
    def checkout(self, base_url: str, pr_number: int) -> Iterator[WorkingCopy]:
        """
        Clone ``base_url`` and merge ``refs/pull/<pr_number>/head`` into it.

        Args:
            base_url: Clone URL of the base repository
            pr_number: Pull request number

        Yields:
            WorkingCopy valid until the context exits

        Raises:
            MergeConflictError: The pull request conflicts with its base
            CheckoutError: Any other git or filesystem failure
        """
        try:
            temp_dir = tempfile.TemporaryDirectory(prefix=f"pr-{pr_number}-", dir=self.work_root)
        except OSError as e:
            raise CheckoutError(f"Cannot create working directory: {e}") from e

        with temp_dir as path:
            logger.debug(f"Checking out PR {pr_number} of {base_url} in {path}")
            self._clone_and_merge(Path(path), base_url, pr_number)
            yield WorkingCopy(path=Path(path), pr_number=pr_number, base_url=base_url)

        logger.debug(f"Removed working copy for PR {pr_number}")

    def _clone_and_merge(self, path: Path, base_url: str, pr_number: int) -> None:
        branch = f"pr-{pr_number}"

        try:
            repo = Repo.clone_from(base_url, str(path))
        except (GitCommandError, OSError) as e:
            raise CheckoutError(f"Cannot clone {base_url}: {e}") from e

        try:
            try:
                repo.git.fetch("origin", f"refs/pull/{pr_number}/head:{branch}")
            except (GitCommandError, OSError) as e:
                raise CheckoutError(f"Cannot fetch PR {pr_number} from {base_url}: {e}") from e

            with repo.config_writer() as writer:
                writer.set_value("user", "name", self.committer_name)
                writer.set_value("user", "email", self.committer_email)
            repo.git.merge("--no-ff", "--no-edit", branch)
        except GitCommandError as e:
            if self._is_conflict(repo, e):
                logger.info(f"PR {pr_number} does not merge cleanly")
                raise MergeConflictError(pr_number, details=str(e.stdout)) from e
            raise CheckoutError(f"Cannot merge PR {pr_number}: {e}") from e
        except OSError as e:
            raise CheckoutError(f"Cannot merge PR {pr_number}: {e}") from e
        finally:
            repo.close()

    def _is_conflict(self, repo: Repo, error: GitCommandError) -> bool:
        """Distinguish a conflicting merge from other merge failures."""
        if "CONFLICT" in f"{error.stdout}{error.stderr}":
            return True
        return bool(repo.index.unmerged_blobs())
