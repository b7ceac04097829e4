"""
PR Review Pipeline

Orchestrates the processing of a single webhook message:
decode, classify, label, sign-off check, checkout and format check.
Stages run strictly in order; GitHub and git failures propagate to the
caller so the message can be redelivered.
"""

import time
import logging
from typing import Callable, Optional

from .config import AppConfig
from .github.client import GitHubClient
from .github.decoder import WebhookDecoder
from .checks.classifier import Classifier
from .checks.signing import SigningChecker
from .checks.formatting import FormatChecker, build_format_checker
from .workspace.checkout import WorkingCopyManager, MergeConflictError
from .formatting.comments import CommentFormatter
from .models.event import PullRequestEvent
from .models.review import Label, ReviewOutcome


logger = logging.getLogger(__name__)


class FixedDelay:
    """
    Blocking pause before labels are applied.

    An external project-board automation strips labels set moments after a
    pull request opens; waiting first narrows that race without closing it.
    """

    def __init__(self, seconds: float, sleep: Callable[[float], None] = time.sleep):
        if seconds < 0:
            raise ValueError("Delay must be non-negative")
        self.seconds = seconds
        self._sleep = sleep

    def wait(self) -> None:
        if self.seconds > 0:
            logger.debug(f"Waiting {self.seconds}s before labelling")
            self._sleep(self.seconds)


class NoDelay(FixedDelay):
    """Wait policy that never blocks."""

    def __init__(self):
        super().__init__(0)


class ReviewPipeline:
    """
    Per-message review pipeline.

    All collaborators are injected so the pipeline can run against fakes.
    """

    def __init__(
        self,
        github: GitHubClient,
        classifier: Classifier,
        signing_checker: SigningChecker,
        workspace: WorkingCopyManager,
        format_checker: FormatChecker,
        comment_formatter: CommentFormatter,
        wait_policy: Optional[FixedDelay] = None,
        decoder: Optional[WebhookDecoder] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            github: GitHub API client
            classifier: Label classifier
            signing_checker: Commit sign-off checker
            workspace: Working copy manager
            format_checker: Format checker for changed files
            comment_formatter: Builds comment bodies
            wait_policy: Pause before labelling (no pause if None)
            decoder: Webhook decoder
        """
        self.github = github
        self.classifier = classifier
        self.signing_checker = signing_checker
        self.workspace = workspace
        self.format_checker = format_checker
        self.comment_formatter = comment_formatter
        self.wait_policy = wait_policy or NoDelay()
        self.decoder = decoder or WebhookDecoder()

    @classmethod
    def from_config(cls, config: AppConfig) -> "ReviewPipeline":
        """Wire the production collaborators from configuration."""
        review = config.review
        label_names = {
            Label.DESIGN_REVIEW: review.design_review_label,
            Label.DOCS_REVIEW: review.docs_review_label,
            Label.TRIAGE: review.triage_label,
        }

        return cls(
            github=GitHubClient(
                config.github.token,
                base_url=config.github.api_base_url,
                timeout=config.github.timeout_seconds,
            ),
            classifier=Classifier(review.doc_patterns, label_names=label_names),
            signing_checker=SigningChecker(review.accept_verified_signatures),
            workspace=WorkingCopyManager(work_root=review.work_root),
            format_checker=build_format_checker(review.formatter),
            comment_formatter=CommentFormatter(review.contributing_url),
            wait_policy=FixedDelay(review.label_delay_seconds),
        )

    def process(self, body: bytes) -> ReviewOutcome:
        """
        Process one queue message.

        Args:
            body: Raw webhook payload

        Returns:
            SKIPPED for inapplicable payloads, CONFLICT when the pull request
            does not merge, COMPLETED otherwise

        Raises:
            GitHubAPIError: A GitHub call failed
            CheckoutError: The working copy could not be created
        """
        event = self.decoder.decode(body)
        if not self.decoder.is_applicable(event):
            return ReviewOutcome.SKIPPED

        return self.review(event)

    def review(self, event: PullRequestEvent) -> ReviewOutcome:
        """Run every check against an opened pull request."""
        logger.info(f"Reviewing PR {event.repository}#{event.number}")

        event = self.decoder.refresh(event, self.github.get_pull_request_by_url(event.url))
        changed_files = self.github.get_pull_request_files(event.base_owner, event.base_name, event.number)

        label = self.classifier.classify(event.title, changed_files)

        self.wait_policy.wait()

        labels = [self.classifier.label_name(label)]
        logger.debug(f"Adding labels {labels} to pr {event.number}")
        self.github.apply_labels(event.base_owner, event.base_name, event.number, labels)
        logger.info(f"Added labels {labels} to pr {event.number}")

        commits = self.github.get_pull_request_commits(event.base_owner, event.base_name, event.number)
        if not self.signing_checker.commits_are_signed(commits):
            self._comment(event, self.comment_formatter.signing_instructions(event))
            logger.info(f"Added comment to unsigned PR {event.number}")

        base_url = event.base_clone_url or event.base_html_url
        try:
            with self.workspace.checkout(base_url, event.number) as working_copy:
                report = self.format_checker.check(working_copy, changed_files)
                if not report.compliant:
                    self._comment(event, self.comment_formatter.format_violations(report))
                    logger.info(f"Added comment to unformatted PR {event.number}")
        except MergeConflictError:
            self._comment(event, self.comment_formatter.merge_conflict_notice())
            logger.info(f"Added comment to unmergeable PR {event.number}")
            return ReviewOutcome.CONFLICT

        return ReviewOutcome.COMPLETED

    def _comment(self, event: PullRequestEvent, body: str) -> None:
        self.github.add_comment(event.base_owner, event.base_name, event.number, body)
