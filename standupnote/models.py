"""Data models for standupnote.

Contains:
- FileChange: A single file entry of a commit diff
- CommitDiff: Per-file patches of a commit
- PullRequestRef: Pull request associated with a commit
- Commit: A commit as supplied by the caller (read-only)
- Repository: A repository listed for commit collection
- TicketGroup: All commits, PRs and diffs associated with one ticket
- GroupingResult: Ticket groups plus orphan commits
- TicketSummary: Per-ticket section of an LLM summary
- SummaryResult: The normalized summary returned by every provider

Wire models accept both the camelCase names used by the web dashboard
(repoFullName, bulletPoints, ...) and snake_case names.
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model accepting camelCase aliases and snake_case field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class FileChange(WireModel):
    """A single file in a commit diff.

    Attributes:
        filename: Path of the file in the repository.
        status: Change status (added, modified, removed, renamed, ...).
        additions: Number of added lines.
        deletions: Number of deleted lines.
        patch: Unified diff text; absent for binary files and pure renames.
    """

    filename: str
    status: str = "modified"
    additions: int = 0
    deletions: int = 0
    patch: Optional[str] = None

    @field_validator("additions", "deletions", mode="before")
    @classmethod
    def none_is_zero(cls, v):
        """Treat missing counts as zero."""
        return 0 if v is None else v


class CommitDiff(WireModel):
    """Per-file patches of one commit."""

    sha: str = ""
    files: list[FileChange] = []

    @field_validator("files", mode="before")
    @classmethod
    def ensure_files_list(cls, v):
        """Ensure files is a list."""
        if v is None:
            return []
        return v


class PullRequestRef(WireModel):
    """Pull request associated with a commit."""

    number: int
    title: str = ""
    url: str = ""
    state: str = "open"
    merged: bool = False
    base_branch: str = ""
    head_branch: str = ""

    @property
    def status_label(self) -> str:
        """MERGED, OPEN or CLOSED."""
        return "MERGED" if self.merged else self.state.upper()


class Commit(WireModel):
    """A commit enriched with stats, branch, pull request and diff."""

    sha: str
    message: str = ""
    author: str = ""
    author_email: str = ""
    date: str = ""
    url: str = ""
    repo_full_name: str = ""
    additions: int = 0
    deletions: int = 0
    files_changed: int = 0
    branch_name: Optional[str] = None
    pull_request: Optional[PullRequestRef] = None
    diff: Optional[CommitDiff] = None

    @field_validator("additions", "deletions", "files_changed", mode="before")
    @classmethod
    def none_is_zero(cls, v):
        """Treat missing stats as zero (e.g. when the detail fetch failed)."""
        return 0 if v is None else v

    @field_validator("message", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        """Treat a missing message as empty."""
        return "" if v is None else v

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n")[0]


class Repository(WireModel):
    """A repository the authenticated user can read."""

    id: int
    name: str
    full_name: str
    description: Optional[str] = None
    private: bool = False
    owner: str = ""
    language: Optional[str] = None
    pushed_at: Optional[str] = None
    url: str = ""


@dataclass
class TicketGroup:
    """Aggregated view of every commit, PR and diff associated with one ticket."""

    ticket_id: str
    ticket_url: str
    commits: list[Commit] = field(default_factory=list)
    pull_requests: list[PullRequestRef] = field(default_factory=list)
    files_changed: list[str] = field(default_factory=list)
    total_additions: int = 0
    total_deletions: int = 0
    diffs: list[CommitDiff] = field(default_factory=list)

    def has_commit(self, sha: str) -> bool:
        return any(c.sha == sha for c in self.commits)

    def add_commit(self, commit: Commit, max_diffs: int = 3) -> bool:
        """Add a commit and update the aggregates.

        Args:
            commit: The commit to add.
            max_diffs: Maximum number of diffs carried by the group.

        Returns:
            False if the commit was already part of this group.
        """
        if self.has_commit(commit.sha):
            return False

        self.commits.append(commit)
        self.total_additions += commit.additions
        self.total_deletions += commit.deletions

        pr = commit.pull_request
        if pr is not None and all(p.number != pr.number for p in self.pull_requests):
            self.pull_requests.append(pr)

        if commit.diff is not None:
            for file in commit.diff.files:
                if file.filename not in self.files_changed:
                    self.files_changed.append(file.filename)
            # Excess diffs are dropped
            if len(self.diffs) < max_diffs:
                self.diffs.append(commit.diff)

        return True


@dataclass
class GroupingResult:
    """Ticket groups in first-seen order plus commits with no ticket."""

    groups: list[TicketGroup] = field(default_factory=list)
    orphans: list[Commit] = field(default_factory=list)

    @property
    def ticket_ids(self) -> list[str]:
        return [g.ticket_id for g in self.groups]


class TicketSummary(WireModel):
    """Summary of the work done on one ticket."""

    ticket_id: str
    summary: str = ""
    bullet_points: list[str] = []
    code_insights: Optional[list[str]] = None
    files_changed: Optional[list[str]] = None


class SummaryResult(WireModel):
    """Normalized stand-up summary.

    Attributes:
        summary: Free-text overview.
        bullet_points: Flat bullet points (legacy shape).
        highlights: Notable achievements.
        tickets: Per-ticket summaries.
        untracked: Descriptions of work not associated with a ticket.
    """

    summary: str
    bullet_points: list[str] = []
    highlights: list[str] = []
    tickets: Optional[list[TicketSummary]] = None
    untracked: Optional[list[str]] = None

    @classmethod
    def empty(cls, summary: str) -> "SummaryResult":
        """Build a result with only an overview and every list empty."""
        return cls(summary=summary, bullet_points=[], highlights=[], tickets=[], untracked=[])
