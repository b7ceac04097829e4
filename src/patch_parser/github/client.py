"""
GitHub API Client

Handles GitHub API authentication, rate limit bookkeeping, and communication.
Provides the pull request, label and comment calls used by the review pipeline.
"""

import time
import logging
from typing import Dict, List, Optional
from datetime import datetime
import requests


logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client with authentication and error handling.

    Requests are made once; a failed call raises GitHubAPIError and the
    message that triggered it is redelivered by the queue.
    """

    def __init__(self, token: str, base_url: str = "https://api.github.com", timeout: int = 30):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Per-request timeout in seconds
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def _create_session(self) -> requests.Session:
        """Create requests session with authentication."""
        session = requests.Session()
        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'patch-parser/1.0'
        })
        return session

    def _check_rate_limit(self) -> None:
        """Fail fast when the known rate limit is exhausted."""
        if self.rate_limit_remaining <= 0 and datetime.now() < self.rate_limit_reset:
            logger.warning(f"Rate limit exhausted, resets at {self.rate_limit_reset}")
            raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL) or an absolute API URL
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        self._check_rate_limit()

        if endpoint.startswith(('http://', 'https://')):
            url = endpoint
        else:
            url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if response.status_code == 429 or (response.status_code == 403 and self.rate_limit_remaining == 0):
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def _paginate(self, endpoint: str, per_page: int = 100) -> List[Dict]:
        """Collect every page of a list endpoint."""
        items = []
        page = 1

        while True:
            response = self._make_request(
                'GET',
                endpoint,
                params={'page': page, 'per_page': per_page}
            )

            page_items = response.json()
            if not page_items:
                break

            items.extend(page_items)

            if len(page_items) < per_page:
                break

            page += 1

        return items

    def get_pull_request_by_url(self, url: str) -> Dict:
        """
        Get pull request information from its API URL.

        Args:
            url: The ``pull_request.url`` field of a webhook payload

        Returns:
            Pull request data
        """
        logger.info(f"Fetching PR {url}")

        response = self._make_request('GET', url)
        return response.json()

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> List[str]:
        """
        Get paths of files changed in a pull request, in API order.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            List of changed file paths
        """
        logger.info(f"Fetching PR files for {owner}/{repo}#{pr_number}")

        files = self._paginate(f'/repos/{owner}/{repo}/pulls/{pr_number}/files')

        logger.info(f"Found {len(files)} changed files")
        return [f['filename'] for f in files]

    def get_pull_request_commits(self, owner: str, repo: str, pr_number: int) -> List[Dict]:
        """
        Get commits of a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            List of commit data
        """
        logger.info(f"Fetching PR commits for {owner}/{repo}#{pr_number}")

        return self._paginate(f'/repos/{owner}/{repo}/pulls/{pr_number}/commits')

    def apply_labels(self, owner: str, repo: str, issue_number: int, labels: List[str]) -> List[Dict]:
        """
        Add labels to an issue or pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue or pull request number
            labels: Label names to add

        Returns:
            The issue's labels after the update
        """
        logger.debug(f"Adding labels {labels} to {owner}/{repo}#{issue_number}")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{issue_number}/labels',
            json={'labels': labels}
        )
        return response.json()

    def add_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Dict:
        """
        Add a comment to an issue or pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue or pull request number
            body: Markdown comment body

        Returns:
            Created comment data
        """
        logger.debug(f"Adding comment to {owner}/{repo}#{issue_number}")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{issue_number}/comments',
            json={'body': body}
        )
        return response.json()
