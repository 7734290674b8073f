"""Shared helpers for standupnote CLI commands."""

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import NoReturn, Optional, Sequence

import typer
from pydantic import ValidationError

from standupnote import global_config
from standupnote.complexity import ComplexityMetrics
from standupnote.github import GITHUB_TOKEN_ENV_VAR, GitHubClient
from standupnote.models import Commit, GroupingResult, SummaryResult


class CommitInputError(ValueError):
    """Raised when commits cannot be loaded from the given input."""

    pass


def setup_logging(verbose: bool) -> None:
    """Configure logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def load_commits_file(path: Path) -> list[Commit]:
    """Load commits from a JSON file.

    The file holds a list of commit objects or {"commits": [...]}.

    Raises:
        CommitInputError: If the file cannot be read or validated.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CommitInputError(f"Cannot read commits from {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("commits")
    if not isinstance(data, list):
        raise CommitInputError(f"{path} must contain a list of commits or an object with a 'commits' list")

    try:
        return [Commit.model_validate(item) for item in data]
    except ValidationError as e:
        raise CommitInputError(f"Invalid commit in {path}: {e}") from e


def get_github_token() -> str:
    """Get the GitHub token from the environment or credentials file."""
    token = os.getenv(GITHUB_TOKEN_ENV_VAR) or global_config.get_credential(GITHUB_TOKEN_ENV_VAR)
    if not token:
        raise CommitInputError(
            f"GitHub token not found. Set {GITHUB_TOKEN_ENV_VAR} or run: standupnote config set-key github"
        )
    return token


def collect_commits(
    commits_file: Optional[Path],
    repos: Optional[Sequence[str]],
    day: Optional[date],
) -> list[Commit]:
    """Load commits from a file, or fetch them from GitHub.

    Raises:
        CommitInputError: If neither source is given or the input is invalid.
        GitHubError: If GitHub requests fail.
    """
    if commits_file is not None:
        return load_commits_file(commits_file)

    if repos:
        client = GitHubClient(get_github_token())
        email = client.fetch_user_email()
        return client.fetch_commits_for_repos(repos, user_email=email, target_date=day)

    raise CommitInputError("Provide --commits-file or at least one --repo")


def render_summary(result: SummaryResult) -> str:
    """Render a SummaryResult as plain text for the terminal."""
    lines = [result.summary]

    for ticket in result.tickets or []:
        lines.append("")
        lines.append(f"{ticket.ticket_id}: {ticket.summary}")
        lines.extend(f"  - {b}" for b in ticket.bullet_points)
        for insight in ticket.code_insights or []:
            lines.append(f"  * {insight}")
        if ticket.files_changed:
            lines.append(f"  Files: {', '.join(ticket.files_changed)}")

    sections = [
        ("Other work", result.untracked or []),
        ("Key points", result.bullet_points),
        ("Highlights", result.highlights),
    ]
    for title, items in sections:
        if items:
            lines.append("")
            lines.append(f"{title}:")
            lines.extend(f"  - {item}" for item in items)

    return "\n".join(lines)


def grouping_to_dict(grouping: GroupingResult) -> dict:
    """Serialize ticket groups and orphans for JSON output."""
    return {
        "ticketGroups": [
            {
                "ticketId": g.ticket_id,
                "ticketUrl": g.ticket_url,
                "commits": [c.sha for c in g.commits],
                "pullRequests": [pr.number for pr in g.pull_requests],
                "filesChanged": g.files_changed,
                "totalAdditions": g.total_additions,
                "totalDeletions": g.total_deletions,
            }
            for g in grouping.groups
        ],
        "orphans": [c.sha for c in grouping.orphans],
    }


def render_complexity(metrics: ComplexityMetrics) -> str:
    return (
        f"Complexity: {metrics.level.value} (score {metrics.score})\n"
        f"  Commits: {metrics.total_commits}\n"
        f"  Lines: +{metrics.total_additions}/-{metrics.total_deletions}\n"
        f"  Files changed: {metrics.total_files_changed}"
    )


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)
