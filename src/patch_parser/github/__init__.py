"""
GitHub Integration Layer

This module provides GitHub API access for pull request details,
labels and comments, and decoding of pull request webhooks.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .decoder import WebhookDecoder

__all__ = ['GitHubClient', 'GitHubAPIError', 'RateLimitExceeded', 'WebhookDecoder']
