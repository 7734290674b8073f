"""CLI command for listing the repositories commits can be collected from."""

import json

import typer

from standupnote.cli.utils import CommitInputError, fail, get_github_token
from standupnote.github import GitHubClient, GitHubError


def repos_command(
    limit: int = typer.Option(30, "--limit", "-n", help="Maximum repositories to show (0 for all)"),
    as_json: bool = typer.Option(False, "--json", "-j", help="Print the repositories as JSON"),
) -> None:
    """List your GitHub repositories, most recently pushed first."""
    try:
        repos = GitHubClient(get_github_token()).fetch_user_repos()
    except (CommitInputError, GitHubError) as e:
        fail(str(e))

    if limit > 0:
        repos = repos[:limit]

    if as_json:
        typer.echo(json.dumps([r.model_dump(by_alias=True) for r in repos], indent=2))
        return

    if not repos:
        typer.echo("No repositories found.")
        return

    for repo in repos:
        visibility = "private" if repo.private else "public"
        typer.echo(f"{repo.full_name}  ({visibility}, pushed {repo.pushed_at or 'never'})")
        if repo.description:
            typer.echo(f"    {repo.description}")
