"""CLI commands for building and generating stand-up summaries."""

import json
from pathlib import Path
from typing import List, Optional

import typer

from standupnote.cli.utils import (
    collect_commits,
    fail,
    grouping_to_dict,
    render_complexity,
    render_summary,
)
from standupnote.complexity import calculate_complexity
from standupnote.dates import parse_day
from standupnote.github import GitHubError
from standupnote.global_config import GlobalConfigError
from standupnote.llm import LLMError, generate_summary, get_provider
from standupnote.models import GroupingResult
from standupnote.prompt import PromptOptions, build_grouped_prompt, resolve_grouping
from standupnote.tickets import extract_tickets_with_urls

COMMITS_FILE_OPTION = typer.Option(
    None,
    "--commits-file",
    "-f",
    help="JSON file with a list of commits (or {\"commits\": [...]})",
)
REPO_OPTION = typer.Option(
    None,
    "--repo",
    "-r",
    help="GitHub repository (owner/name) to fetch commits from; repeatable",
)
DATE_OPTION = typer.Option(
    None,
    "--date",
    help="Day to summarize (YYYY-MM-DD). Defaults to the previous working day",
)
TICKET_URL_OPTION = typer.Option(
    None,
    "--ticket-url",
    help="Base URL for ticket links (e.g. https://example.atlassian.net/browse)",
)


def _load(commits_file: Optional[Path], repo: Optional[List[str]], day: Optional[str]):
    try:
        target = parse_day(day) if day else None
        return collect_commits(commits_file, repo, target)
    # ValueError covers CommitInputError and bad --date values
    except (ValueError, GitHubError, GlobalConfigError) as e:
        fail(str(e))


def summarize_command(
    commits_file: Optional[Path] = COMMITS_FILE_OPTION,
    repo: Optional[List[str]] = REPO_OPTION,
    day: Optional[str] = DATE_OPTION,
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        "-p",
        help="LLM provider (openai, anthropic, google). Defaults to the configured provider",
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model override"),
    ticket_url: Optional[str] = TICKET_URL_OPTION,
    as_json: bool = typer.Option(False, "--json", "-j", help="Print the result as JSON"),
    show_prompt: bool = typer.Option(
        False,
        "--show-prompt",
        help="Also print the prompt sent to the LLM (as a \"prompt\" key with --json)",
    ),
) -> None:
    """Generate a stand-up summary of a day's commits."""
    commits = _load(commits_file, repo, day)

    try:
        generation = generate_summary(commits, provider=provider, model=model, base_url=ticket_url)
    except (LLMError, GlobalConfigError) as e:
        fail(str(e))

    if as_json:
        payload = {
            "summary": generation.summary.model_dump(by_alias=True),
            **grouping_to_dict(GroupingResult(generation.groups, generation.orphans)),
            "complexity": calculate_complexity(commits).to_dict(),
            "model": generation.model,
            "inputTokens": generation.input_tokens,
            "outputTokens": generation.output_tokens,
        }
        if show_prompt:
            payload["prompt"] = generation.prompt
        typer.echo(json.dumps(payload, indent=2))
        return

    if show_prompt and generation.prompt:
        typer.echo(generation.prompt)
        typer.echo()

    typer.echo(render_summary(generation.summary))
    if generation.model:
        typer.echo()
        typer.echo(
            f"[{generation.model}: {generation.input_tokens} input / {generation.output_tokens} output tokens]"
        )


def prompt_command(
    commits_file: Optional[Path] = COMMITS_FILE_OPTION,
    repo: Optional[List[str]] = REPO_OPTION,
    day: Optional[str] = DATE_OPTION,
    ticket_url: Optional[str] = TICKET_URL_OPTION,
) -> None:
    """Print the prompt for a day's commits without calling an LLM."""
    commits = _load(commits_file, repo, day)
    options = PromptOptions(base_url=ticket_url)
    typer.echo(build_grouped_prompt(resolve_grouping(commits, options=options), options))


def complexity_command(
    commits_file: Optional[Path] = COMMITS_FILE_OPTION,
    repo: Optional[List[str]] = REPO_OPTION,
    day: Optional[str] = DATE_OPTION,
    as_json: bool = typer.Option(False, "--json", "-j", help="Print the metrics as JSON"),
) -> None:
    """Show the complexity of a day's commits."""
    metrics = calculate_complexity(_load(commits_file, repo, day))
    if as_json:
        typer.echo(json.dumps(metrics.to_dict(), indent=2))
    else:
        typer.echo(render_complexity(metrics))


def tickets_command(
    text: str = typer.Argument(..., help="Branch name, PR title or commit message"),
    ticket_url: Optional[str] = TICKET_URL_OPTION,
) -> None:
    """List the ticket keys found in a text."""
    links = extract_tickets_with_urls(text, ticket_url)
    if not links:
        typer.echo("No tickets found.")
        return
    for link in links:
        typer.echo(f"{link.ticket_id}  {link.url}")


def test_key_command(
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        "-p",
        help="LLM provider to check. Defaults to the configured provider",
    ),
) -> None:
    """Check that the API key of a provider is accepted."""
    try:
        llm = get_provider(provider)
        result = llm.test_connection()
    except (LLMError, GlobalConfigError) as e:
        fail(str(e))

    if result.success:
        typer.echo(f"✓ {llm.display_name} API key is valid")
    else:
        fail(f"{llm.display_name} rejected the API key: {result.error}")

