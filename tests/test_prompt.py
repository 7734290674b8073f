"""Tests for standupnote.prompt module."""

import json

from conftest import BASE_URL, make_commit, make_diff
from standupnote.grouping import GroupingOptions, group_commits_by_ticket
from standupnote.llm.prompts import NO_TICKET_HEADING
from standupnote.models import GroupingResult
from standupnote.prompt import (
    PromptOptions,
    build_grouped_prompt,
    build_prompt,
    build_response_schema,
    format_commit_line,
    resolve_grouping,
)


def _schema_from_prompt(prompt):
    start = prompt.index("{", prompt.index("[OUTPUT SCHEMA]"))
    end = prompt.rindex("}") + 1
    return json.loads(prompt[start:end])


class TestBuildResponseSchema:
    """Tests for build_response_schema function."""

    def test_one_entry_per_ticket(self):
        """Test every ticket ID gets a schema entry."""
        schema = json.loads(build_response_schema(["ABC-1", "DEF-2"]))
        assert [t["ticketId"] for t in schema["tickets"]] == ["ABC-1", "DEF-2"]

    def test_top_level_keys(self):
        """Test the top-level response keys."""
        schema = json.loads(build_response_schema([]))
        assert list(schema) == ["summary", "tickets", "untracked", "bulletPoints", "highlights"]
        assert schema["tickets"] == []

    def test_ticket_entry_keys(self):
        """Test each ticket entry lists the per-ticket fields."""
        entry = json.loads(build_response_schema(["ABC-1"]))["tickets"][0]
        assert set(entry) == {"ticketId", "summary", "bulletPoints", "codeInsights", "filesChanged"}


class TestFormatCommitLine:
    """Tests for format_commit_line function."""

    def test_short_sha_subject_and_counts(self):
        """Test the first message line and short SHA are used."""
        commit = make_commit("abcdef123456", "Fix bug\n\nLonger body", additions=3, deletions=1)
        assert format_commit_line(commit) == "  - [abcdef1] Fix bug (+3/-1)\n"


class TestBuildPrompt:
    """Tests for build_prompt function."""

    def test_mentions_every_ticket(self, sample_commits):
        """Test every discovered ticket is listed and in the schema."""
        prompt = build_prompt(sample_commits, options=PromptOptions(base_url=BASE_URL))

        for ticket in ["ABC-12", "SC-7", "XYZ-9"]:
            assert f"## Ticket: {ticket}" in prompt
        schema = _schema_from_prompt(prompt)
        assert [t["ticketId"] for t in schema["tickets"]] == ["ABC-12", "SC-7", "XYZ-9"]

    def test_ticket_section_contents(self, sample_commits):
        """Test URL, totals, PR and file list of a ticket section."""
        prompt = build_prompt(sample_commits, options=PromptOptions(base_url=BASE_URL))

        assert f"URL: {BASE_URL}/SC-7" in prompt
        assert "PR #42: SC-7: Add export endpoint [MERGED]" in prompt
        assert "Branch: feature/SC-7-export → main" in prompt
        assert "Total changes: +40/-0 across 2 files" in prompt
        assert "Files modified: app/export.py, tests/test_export.py" in prompt

    def test_orphan_section(self, sample_commits):
        """Test commits without tickets are rendered under their own heading."""
        prompt = build_prompt(sample_commits, options=PromptOptions(base_url=BASE_URL))

        assert f"## {NO_TICKET_HEADING}" in prompt
        orphan_section = prompt.split(f"## {NO_TICKET_HEADING}")[1]
        assert "[d4e5f6a] Bump dependencies" in orphan_section
        assert "File: requirements.txt" in orphan_section

    def test_no_orphan_section_without_orphans(self):
        """Test the orphan heading is omitted when every commit has a ticket."""
        prompt = build_prompt([make_commit("a1", "ABC-1 fix")], options=PromptOptions(base_url=BASE_URL))
        assert f"## {NO_TICKET_HEADING}" not in prompt

    def test_counts(self, sample_commits):
        """Test ticket and distinct commit counts."""
        prompt = build_prompt(sample_commits, options=PromptOptions(base_url=BASE_URL))
        assert "Tickets: 3\n" in prompt
        assert "Commits: 4\n" in prompt

    def test_deterministic(self, sample_commits):
        """Test the same input renders the same prompt."""
        options = PromptOptions(base_url=BASE_URL)
        assert build_prompt(sample_commits, options=options) == build_prompt(sample_commits, options=options)

    def test_pre_grouped_equals_flat(self, sample_commits):
        """Test pre-computed groups render the same prompt as internal grouping."""
        options = PromptOptions(base_url=BASE_URL)
        groups = group_commits_by_ticket(sample_commits, GroupingOptions(base_url=BASE_URL)).groups

        assert build_prompt(sample_commits, groups=groups, options=options) == build_prompt(
            sample_commits, options=options
        )

    def test_ticket_diff_file_limit(self):
        """Test ticket diffs render at most three files each."""
        commit = make_commit("a1", "ABC-1 big change", diff=make_diff("a1", *[f"f{i}.py" for i in range(6)]))

        prompt = build_prompt([commit], options=PromptOptions(base_url=BASE_URL))

        code = prompt.split("Code Changes:")[1].split("Files modified:")[0]
        assert code.count("File: ") == 3
        assert "... and 3 more files" in code

    def test_listed_files_limit(self):
        """Test the files-modified list is capped."""
        commit = make_commit("a1", "ABC-1 big change", diff=make_diff("a1", *[f"f{i}.py" for i in range(12)]))

        prompt = build_prompt([commit], options=PromptOptions(base_url=BASE_URL))

        assert "f9.py ... and 2 more" in prompt

    def test_empty(self):
        """Test a prompt with no activity still carries the schema."""
        prompt = build_grouped_prompt(GroupingResult())
        assert "Tickets: 0" in prompt
        assert _schema_from_prompt(prompt)["tickets"] == []


class TestResolveGrouping:
    """Tests for resolve_grouping function."""

    def test_groups_when_none_given(self, sample_commits):
        """Test commits are grouped internally."""
        grouping = resolve_grouping(sample_commits, options=PromptOptions(base_url=BASE_URL))
        assert grouping.ticket_ids == ["ABC-12", "SC-7", "XYZ-9"]
        assert [c.sha for c in grouping.orphans] == ["d4e5f6a1b2c3"]

    def test_uses_given_groups(self, sample_commits):
        """Test pre-computed groups are kept and orphans derived from them."""
        groups = group_commits_by_ticket(sample_commits[:1]).groups

        grouping = resolve_grouping(sample_commits, groups=groups)

        assert grouping.groups == groups
        assert [c.sha for c in grouping.orphans] == ["b2c3d4e5f6a1", "c3d4e5f6a1b2", "d4e5f6a1b2c3"]
