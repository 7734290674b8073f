"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

import standupnote.config as config
from standupnote.models import Commit, CommitDiff, FileChange, PullRequestRef


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(mocker, monkeypatch, temp_dir):
    """Keep tests away from ~/.standupnote and real API keys."""
    mocker.patch("standupnote.global_config._CONFIG_DIR", temp_dir / ".standupnote")
    for env_var in [*config.API_KEY_ENV_VARS.values(), "GITHUB_TOKEN", config.TICKET_BASE_URL_ENV_VAR]:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setattr(config, "ACTIVE_PROVIDER", config.DEFAULT_PROVIDER)
    monkeypatch.setattr(config, "ACTIVE_MODEL", None)
    monkeypatch.setattr(config, "MAX_TOKENS", config.DEFAULT_MAX_TOKENS)
    monkeypatch.setattr(config, "TEMPERATURE", config.DEFAULT_TEMPERATURE)
    monkeypatch.setattr(config, "TIMEOUT", config.DEFAULT_TIMEOUT)
    monkeypatch.setattr(config, "TICKET_BASE_URL", None)


BASE_URL = "https://example.atlassian.net/browse"


def make_diff(sha, *filenames, patch="@@ -1 +1 @@\n-old\n+new"):
    """Build a CommitDiff with one patched file per filename."""
    return CommitDiff(
        sha=sha,
        files=[FileChange(filename=f, additions=1, deletions=1, patch=patch) for f in filenames],
    )


def make_commit(sha, message="Update code", **kwargs):
    return Commit(sha=sha, message=message, **kwargs)


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def sample_pull_request():
    """Merged pull request from a ticket branch."""
    return PullRequestRef(
        number=42,
        title="SC-7: Add export endpoint",
        url="https://github.com/acme/api/pull/42",
        state="closed",
        merged=True,
        base_branch="main",
        head_branch="feature/SC-7-export",
    )


@pytest.fixture
def sample_commits(sample_pull_request):
    """A day's commits: two tickets, one commit on both, and one orphan."""
    return [
        make_commit(
            "a1b2c3d4e5f6",
            "ABC-12: Fix login redirect",
            branch_name="feature/ABC-12-login",
            additions=10,
            deletions=2,
            files_changed=1,
            diff=make_diff("a1b2c3d4e5f6", "app/auth.py"),
        ),
        make_commit(
            "b2c3d4e5f6a1",
            "Add CSV export",
            additions=40,
            deletions=0,
            files_changed=2,
            pull_request=sample_pull_request,
            diff=make_diff("b2c3d4e5f6a1", "app/export.py", "tests/test_export.py"),
        ),
        make_commit(
            "c3d4e5f6a1b2",
            "ABC-12 XYZ-9 Share session helper",
            additions=5,
            deletions=5,
            files_changed=1,
        ),
        make_commit(
            "d4e5f6a1b2c3",
            "Bump dependencies\n\nRoutine update.",
            additions=3,
            deletions=3,
            files_changed=1,
            diff=make_diff("d4e5f6a1b2c3", "requirements.txt"),
        ),
    ]


@pytest.fixture
def sample_summary_dict():
    """Parsed summary as returned by a model."""
    return {
        "summary": "Fixed the login redirect and shipped CSV export.",
        "tickets": [
            {
                "ticketId": "ABC-12",
                "summary": "Fixed the login redirect loop.",
                "bulletPoints": ["Reset the session cookie on logout"],
                "codeInsights": ["Redirect target is now validated"],
                "filesChanged": ["app/auth.py"],
            }
        ],
        "untracked": ["Bumped dependencies"],
        "bulletPoints": ["Login fix merged"],
        "highlights": ["CSV export shipped"],
    }


@pytest.fixture
def sample_llm_response():
    """Sample raw LLM response (valid JSON)."""
    return """{
    "summary": "Fixed the login redirect and shipped CSV export.",
    "tickets": [
        {
            "ticketId": "ABC-12",
            "summary": "Fixed the login redirect loop.",
            "bulletPoints": ["Reset the session cookie on logout"],
            "codeInsights": ["Redirect target is now validated"],
            "filesChanged": ["app/auth.py"]
        }
    ],
    "untracked": ["Bumped dependencies"],
    "bulletPoints": ["Login fix merged"],
    "highlights": ["CSV export shipped"]
}"""


@pytest.fixture
def sample_llm_response_with_markdown(sample_llm_response):
    """Sample raw LLM response with markdown code fences."""
    return f"```json\n{sample_llm_response}\n```"
