"""Ticket extraction and link generation utilities.

Contains functions for:
- Extracting ticket keys (e.g. SC-1319) from branch names, PR titles and commit messages
- Building ticket URLs from a configurable base URL
- Collecting the ticket set of a single commit for grouping
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from standupnote.config import get_ticket_base_url
from standupnote.models import Commit

# Matches keys like ABC-123, PROJ-1, SC-1319
TICKET_PATTERN = re.compile(r"[A-Z][A-Z0-9]+-\d+", re.IGNORECASE)

# Ticket right after an optional path separator, followed by -, / or end of string:
# feature/SC-1234, bugfix/SC-1234-fix-something, SC-1234-description
BRANCH_TICKET_PATTERN = re.compile(r"(?:^|/)?([A-Z][A-Z0-9]+-\d+)(?:-|/|$)", re.IGNORECASE)

TICKET_BRANCH_PREFIXES = (
    "feature/",
    "bugfix/",
    "hotfix/",
    "fix/",
    "feat/",
    "task/",
    "story/",
    "issue/",
)


@dataclass(frozen=True)
class TicketLink:
    """A ticket key with its URL."""

    ticket_id: str
    url: str


def extract_tickets(text: Optional[str]) -> list[str]:
    """Extract all ticket keys from a text.

    Args:
        text: Branch name, PR title, commit message or any free text.

    Returns:
        Unique uppercase ticket keys in order of first occurrence.
    """
    if not text:
        return []

    tickets: list[str] = []
    for match in TICKET_PATTERN.finditer(text):
        ticket = match.group(0).upper()
        if ticket not in tickets:
            tickets.append(ticket)
    return tickets


def extract_ticket_from_branch(branch: Optional[str]) -> Optional[str]:
    """Extract the primary ticket key from a branch name.

    Tries the branch-specific pattern first and falls back to the
    first general match.

    Args:
        branch: The branch name.

    Returns:
        The uppercase ticket key or None.
    """
    if not branch:
        return None

    match = BRANCH_TICKET_PATTERN.search(branch)
    if match:
        return match.group(1).upper()

    tickets = extract_tickets(branch)
    return tickets[0] if tickets else None


def contains_ticket(text: Optional[str]) -> bool:
    """Check whether a text contains a ticket key."""
    if not text:
        return False
    return TICKET_PATTERN.search(text) is not None


def format_ticket_id(ticket_id: str) -> str:
    """Format a ticket key for display (uppercase)."""
    return ticket_id.upper()


def get_ticket_url(ticket_id: str, base_url: Optional[str] = None) -> str:
    """Build the URL of a ticket.

    Args:
        ticket_id: The ticket key (e.g. "SC-1319").
        base_url: Base URL; defaults to the configured ticket base URL.

    Returns:
        "{base}/{ticket_id}" with any trailing slash stripped from base.
    """
    base = base_url or get_ticket_base_url()
    return f"{base.rstrip('/')}/{ticket_id}"


def extract_tickets_with_urls(text: Optional[str], base_url: Optional[str] = None) -> list[TicketLink]:
    """Extract ticket keys from a text together with their URLs."""
    return [TicketLink(t, get_ticket_url(t, base_url)) for t in extract_tickets(text)]


def _add_unique(target: list[str], tickets: Iterable[str]) -> None:
    for ticket in tickets:
        if ticket not in target:
            target.append(ticket)


def _branch_tickets(branch: Optional[str]) -> list[str]:
    """Primary branch ticket first, then any other keys in the branch name."""
    tickets: list[str] = []
    primary = extract_ticket_from_branch(branch)
    if primary:
        tickets.append(primary)
    _add_unique(tickets, extract_tickets(branch))
    return tickets


def extract_all_tickets(
    branch_name: Optional[str] = None,
    pr_title: Optional[str] = None,
    commit_messages: Optional[Iterable[str]] = None,
    base_url: Optional[str] = None,
) -> list[TicketLink]:
    """Extract tickets from several sources.

    Sources are searched by reliability: branch name, PR title, then
    each commit message.

    Returns:
        Unique tickets with their URLs, in priority order.
    """
    tickets = _branch_tickets(branch_name)
    _add_unique(tickets, extract_tickets(pr_title))
    for message in commit_messages or ():
        _add_unique(tickets, extract_tickets(message))

    return [TicketLink(t, get_ticket_url(t, base_url)) for t in tickets]


def is_ticket_branch(branch: Optional[str]) -> bool:
    """Check whether a branch looks like a ticket or feature branch."""
    if not branch:
        return False
    return branch.lower().startswith(TICKET_BRANCH_PREFIXES) or extract_ticket_from_branch(branch) is not None


def tickets_for_commit(commit: Commit) -> list[str]:
    """Collect the ticket keys a commit belongs to.

    Looks at the commit's own branch, its pull request's head branch
    and its message, in that order.
    """
    tickets = _branch_tickets(commit.branch_name)
    if commit.pull_request is not None:
        _add_unique(tickets, _branch_tickets(commit.pull_request.head_branch))
    _add_unique(tickets, extract_tickets(commit.message))
    return tickets
