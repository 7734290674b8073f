"""Prompt construction for stand-up summaries.

Contains:
- PromptOptions: Token-budget knobs for prompt rendering
- build_response_schema: JSON schema section naming every discovered ticket
- build_grouped_prompt: Render a prompt from ticket groups and orphans
- build_prompt: Render a prompt from commits, grouping them when needed
"""

import json
from dataclasses import dataclass
from typing import Optional, Sequence

from standupnote.formatters import DiffFormatOptions, format_diff_for_prompt
from standupnote.grouping import GroupingOptions, find_orphans, group_commits_by_ticket
from standupnote.llm.prompts import (
    NO_TICKET_HEADING,
    RESPONSE_FIELD_DESCRIPTIONS,
    TICKET_FIELD_DESCRIPTIONS,
    USER_PROMPT_TEMPLATE_STANDUP,
)
from standupnote.models import Commit, GroupingResult, TicketGroup


@dataclass
class PromptOptions:
    """Limits applied when rendering the prompt.

    Attributes:
        max_diffs_per_ticket: Diffs rendered per ticket group.
        max_files_per_ticket_diff: Files rendered per ticket diff.
        max_files_per_orphan_diff: Files rendered per orphan commit diff.
        max_patch_lines: Patch lines kept per file.
        max_listed_files: Paths listed in "Files modified" per ticket.
        base_url: Ticket link base URL used when grouping internally.
    """

    max_diffs_per_ticket: int = 3
    max_files_per_ticket_diff: int = 3
    max_files_per_orphan_diff: int = 2
    max_patch_lines: int = 30
    max_listed_files: int = 10
    base_url: Optional[str] = None


def build_response_schema(ticket_ids: Sequence[str]) -> str:
    """Render the expected JSON response, with one entry per ticket ID."""
    schema = {
        "summary": RESPONSE_FIELD_DESCRIPTIONS["summary"],
        "tickets": [{"ticketId": t, **TICKET_FIELD_DESCRIPTIONS} for t in ticket_ids],
        "untracked": RESPONSE_FIELD_DESCRIPTIONS["untracked"],
        "bulletPoints": RESPONSE_FIELD_DESCRIPTIONS["bulletPoints"],
        "highlights": RESPONSE_FIELD_DESCRIPTIONS["highlights"],
    }
    return json.dumps(schema, indent=2)


def format_commit_line(commit: Commit) -> str:
    return f"  - [{commit.short_sha}] {commit.subject} (+{commit.additions}/-{commit.deletions})\n"


def format_ticket_group(group: TicketGroup, options: PromptOptions) -> str:
    """Render one ticket section."""
    text = f"\n## Ticket: {group.ticket_id}\n"
    text += f"URL: {group.ticket_url}\n"
    text += (
        f"Total changes: +{group.total_additions}/-{group.total_deletions} "
        f"across {len(group.files_changed)} files\n"
    )

    if group.pull_requests:
        text += "\nPull Requests:\n"
        for pr in group.pull_requests:
            text += f"  - PR #{pr.number}: {pr.title} [{pr.status_label}]\n"
            text += f"    Branch: {pr.head_branch} → {pr.base_branch}\n"

    text += "\nCommits:\n"
    for commit in group.commits:
        text += format_commit_line(commit)

    if group.diffs:
        diff_options = DiffFormatOptions(
            max_files=options.max_files_per_ticket_diff,
            max_patch_lines=options.max_patch_lines,
        )
        text += "\nCode Changes:\n"
        for diff in group.diffs[:options.max_diffs_per_ticket]:
            text += format_diff_for_prompt(diff, diff_options)

    if group.files_changed:
        listed = group.files_changed[:options.max_listed_files]
        text += f"\nFiles modified: {', '.join(listed)}"
        remaining = len(group.files_changed) - len(listed)
        if remaining > 0:
            text += f" ... and {remaining} more"
        text += "\n"

    return text


def format_orphans(orphans: Sequence[Commit], options: PromptOptions) -> str:
    """Render the section for commits with no ticket."""
    if not orphans:
        return ""

    diff_options = DiffFormatOptions(
        max_files=options.max_files_per_orphan_diff,
        max_patch_lines=options.max_patch_lines,
    )
    text = f"\n## {NO_TICKET_HEADING}\n"
    for commit in orphans:
        text += format_commit_line(commit)
        text += format_diff_for_prompt(commit.diff, diff_options)
    return text


def build_grouped_prompt(grouping: GroupingResult, options: Optional[PromptOptions] = None) -> str:
    """Render the full prompt from ticket groups and orphan commits.

    Args:
        grouping: Ticket groups and orphans.
        options: Rendering limits.

    Returns:
        The user prompt string.
    """
    options = options or PromptOptions()

    activity = "".join(format_ticket_group(g, options) for g in grouping.groups)
    activity += format_orphans(grouping.orphans, options)

    commit_count = len({c.sha for g in grouping.groups for c in g.commits} | {c.sha for c in grouping.orphans})
    ticket_ids = grouping.ticket_ids

    return USER_PROMPT_TEMPLATE_STANDUP.format(
        ticket_count=len(ticket_ids),
        commit_count=commit_count,
        activity=activity,
        no_ticket_heading=NO_TICKET_HEADING,
        ticket_ids=", ".join(ticket_ids) if ticket_ids else "(none)",
        response_schema=build_response_schema(ticket_ids),
    )


def build_prompt(
    commits: Sequence[Commit],
    groups: Optional[Sequence[TicketGroup]] = None,
    options: Optional[PromptOptions] = None,
) -> str:
    """Build the prompt for a list of commits.

    Uses pre-computed ticket groups when given; otherwise groups the
    commits first. Both paths render the same structure.

    Args:
        commits: All commits of the period.
        groups: Pre-computed ticket groups.
        options: Rendering limits.

    Returns:
        The user prompt string.
    """
    return build_grouped_prompt(resolve_grouping(commits, groups, options), options)


def resolve_grouping(
    commits: Sequence[Commit],
    groups: Optional[Sequence[TicketGroup]] = None,
    options: Optional[PromptOptions] = None,
) -> GroupingResult:
    """Use pre-computed groups when present, otherwise group the commits."""
    options = options or PromptOptions()
    if groups:
        return GroupingResult(groups=list(groups), orphans=find_orphans(commits, groups))
    return group_commits_by_ticket(
        commits,
        GroupingOptions(base_url=options.base_url, max_diffs_per_group=options.max_diffs_per_ticket),
    )
