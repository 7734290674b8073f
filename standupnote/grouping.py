"""Commit-to-ticket grouping.

A commit joins every ticket group referenced by its branch, its pull
request's head branch or its message, so one commit can appear in several
groups. Commits with no ticket at all are collected as orphans.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from standupnote.models import Commit, GroupingResult, TicketGroup
from standupnote.tickets import get_ticket_url, tickets_for_commit


@dataclass
class GroupingOptions:
    """Options for grouping commits by ticket.

    Attributes:
        base_url: Base URL for ticket links (None uses the configured one).
        max_diffs_per_group: Diffs carried per group for prompt rendering.
    """

    base_url: Optional[str] = None
    max_diffs_per_group: int = 3


def group_commits_by_ticket(
    commits: Iterable[Commit],
    options: Optional[GroupingOptions] = None,
) -> GroupingResult:
    """Partition commits into ticket groups and orphans.

    Args:
        commits: Commits in display order.
        options: Grouping options.

    Returns:
        A GroupingResult with groups in ticket first-seen order and
        commits within each group in input order.
    """
    options = options or GroupingOptions()
    groups: dict[str, TicketGroup] = {}
    orphans: list[Commit] = []

    for commit in commits:
        tickets = tickets_for_commit(commit)
        if not tickets:
            orphans.append(commit)
            continue

        for ticket_id in tickets:
            group = groups.get(ticket_id)
            if group is None:
                group = TicketGroup(
                    ticket_id=ticket_id,
                    ticket_url=get_ticket_url(ticket_id, options.base_url),
                )
                groups[ticket_id] = group
            group.add_commit(commit, max_diffs=options.max_diffs_per_group)

    return GroupingResult(groups=list(groups.values()), orphans=orphans)


def find_orphans(commits: Iterable[Commit], groups: Iterable[TicketGroup]) -> list[Commit]:
    """Return the commits that belong to none of the given groups."""
    grouped = {c.sha for g in groups for c in g.commits}
    return [c for c in commits if c.sha not in grouped]
