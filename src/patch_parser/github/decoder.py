"""
Webhook Decoder

Turns raw queue message bodies into PullRequestEvent objects.
Payloads that are not pull request hooks are skipped, never raised.
"""

import logging
from typing import Dict, Optional

from pydantic import ValidationError

from ..models.event import PullRequestEvent, PullRequestHookPayload, PullRequestPayload


logger = logging.getLogger(__name__)


class WebhookDecoder:
    """Decoder for GitHub ``pull_request`` webhook bodies."""

    def decode(self, body: bytes) -> Optional[PullRequestEvent]:
        """
        Parse a message body into a pull request event.

        Args:
            body: Raw message payload

        Returns:
            PullRequestEvent, or None when the body is not a pull request hook
        """
        try:
            hook = PullRequestHookPayload.model_validate_json(body)
            return PullRequestEvent.from_payload(hook.action, hook.pull_request)
        except (ValidationError, ValueError) as e:
            # not every hook on the topic is a pull request hook
            logger.debug(f"Error parsing hook: {e}")
            return None

    def is_applicable(self, event: Optional[PullRequestEvent]) -> bool:
        """Only newly opened pull requests are reviewed."""
        return event is not None and event.is_opened

    def refresh(self, event: PullRequestEvent, pr_data: Dict) -> PullRequestEvent:
        """
        Rebuild an event from the full pull request API document.

        Args:
            event: Event decoded from the webhook
            pr_data: Response of ``GET`` on the pull request URL

        Returns:
            Event carrying the API's view of the pull request
        """
        pull_request = PullRequestPayload.model_validate(pr_data)
        return PullRequestEvent.from_payload(event.action, pull_request)
