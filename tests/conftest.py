"""
Shared fixtures for patch-parser tests.
"""

import json
import shutil
import pytest
from unittest.mock import Mock
from contextlib import contextmanager
from pathlib import Path

from patch_parser.checks.classifier import Classifier
from patch_parser.checks.signing import SigningChecker
from patch_parser.config import DEFAULT_DOC_PATTERNS
from patch_parser.formatting.comments import CommentFormatter
from patch_parser.models.review import FormatReport, WorkingCopy
from patch_parser.pipeline import ReviewPipeline, NoDelay


def make_pr_data(number=42, title="Add new feature", commits=1, owner="docker", name="docker"):
    """Pull request document as found in webhooks and the REST API."""
    return {
        'number': number,
        'title': title,
        'url': f'https://api.github.com/repos/{owner}/{name}/pulls/{number}',
        'commits': commits,
        'base': {
            'ref': 'master',
            'repo': {
                'name': name,
                'owner': {'login': owner},
                'clone_url': f'https://github.com/{owner}/{name}.git',
                'html_url': f'https://github.com/{owner}/{name}',
                'ssh_url': f'git@github.com:{owner}/{name}.git',
            },
        },
        'head': {
            'ref': 'feature-branch',
            'repo': {
                'name': name,
                'owner': {'login': 'contributor'},
                'clone_url': f'https://github.com/contributor/{name}.git',
                'html_url': f'https://github.com/contributor/{name}',
                'ssh_url': f'git@github.com:contributor/{name}.git',
            },
        },
    }


def make_hook(action="opened", **pr_kwargs) -> bytes:
    """Encoded pull_request webhook body."""
    pr_data = make_pr_data(**pr_kwargs)
    return json.dumps({
        'action': action,
        'number': pr_data['number'],
        'pull_request': pr_data,
    }).encode('utf-8')


def make_commit(message="Fix bug\n\nSigned-off-by: Jane Doe <jane@example.com>", sha="abc123", verified=False):
    return {
        'sha': sha,
        'commit': {
            'message': message,
            'verification': {'verified': verified},
        },
    }


class FakeWorkspace:
    """Working copy manager that records checkouts without running git."""

    def __init__(self, root: Path, error: Exception = None):
        self.root = root
        self.error = error
        self.checkouts = []
        self.active = False

    @contextmanager
    def checkout(self, base_url, pr_number):
        self.checkouts.append((base_url, pr_number))
        if self.error is not None:
            raise self.error
        path = self.root / f"pr-{pr_number}"
        path.mkdir()
        self.active = True
        try:
            yield WorkingCopy(path=path, pr_number=pr_number, base_url=base_url)
        finally:
            self.active = False
            shutil.rmtree(path)


class FakeFormatChecker:
    """Format checker returning a fixed list of violations."""

    def __init__(self, violations=()):
        self.violations = tuple(violations)
        self.calls = []

    def check(self, working_copy, changed_files):
        self.calls.append((working_copy, list(changed_files)))
        return FormatReport(violations=self.violations, fix_command="gofmt -s -w")


@pytest.fixture
def github():
    client = Mock()
    client.get_pull_request_by_url.return_value = make_pr_data()
    client.get_pull_request_files.return_value = ['main.go']
    client.get_pull_request_commits.return_value = [make_commit()]
    return client


@pytest.fixture
def build_pipeline(github, tmp_path):
    """Factory for pipelines wired to fakes."""
    def _build(workspace=None, format_checker=None, wait_policy=None):
        return ReviewPipeline(
            github=github,
            classifier=Classifier(DEFAULT_DOC_PATTERNS),
            signing_checker=SigningChecker(),
            workspace=workspace or FakeWorkspace(tmp_path),
            format_checker=format_checker or FakeFormatChecker(),
            comment_formatter=CommentFormatter("https://example.com/CONTRIBUTING.md#sign-your-work"),
            wait_policy=wait_policy or NoDelay(),
        )
    return _build
