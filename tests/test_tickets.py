"""Tests for standupnote.tickets module."""

import os
from unittest.mock import patch

from conftest import BASE_URL, make_commit
from standupnote.models import PullRequestRef
from standupnote.tickets import (
    TicketLink,
    contains_ticket,
    extract_all_tickets,
    extract_ticket_from_branch,
    extract_tickets,
    extract_tickets_with_urls,
    format_ticket_id,
    get_ticket_url,
    is_ticket_branch,
    tickets_for_commit,
)


class TestExtractTickets:
    """Tests for extract_tickets function."""

    def test_no_tickets(self):
        """Test text without any ticket key."""
        assert extract_tickets("Refactor the scheduler") == []

    def test_empty_and_none(self):
        """Test empty input."""
        assert extract_tickets("") == []
        assert extract_tickets(None) == []

    def test_single_ticket(self):
        """Test a commit message with one key."""
        assert extract_tickets("SC-1319: Fix timezone handling") == ["SC-1319"]

    def test_multiple_tickets_in_order(self):
        """Test keys are returned in order of first occurrence."""
        assert extract_tickets("PROJ-2 and ABC-123, then PROJ-1") == ["PROJ-2", "ABC-123", "PROJ-1"]

    def test_duplicates_removed(self):
        """Test repeated keys are reported once."""
        assert extract_tickets("ABC-1 fix, follow-up for ABC-1") == ["ABC-1"]

    def test_case_insensitive_match_is_uppercased(self):
        """Test lowercase keys are matched and normalized."""
        assert extract_tickets("fixes sc-1319") == ["SC-1319"]
        assert extract_tickets("SC-1319 and sc-1319") == ["SC-1319"]

    def test_project_key_with_digits(self):
        """Test project keys containing digits."""
        assert extract_tickets("A1B2-77 done") == ["A1B2-77"]

    def test_single_letter_project_not_matched(self):
        """Test that a one-character project key is not a ticket."""
        assert extract_tickets("X-1 is not a ticket") == []

    def test_idempotent(self):
        """Test repeated calls on the same text give the same result."""
        text = "feature/SC-1234 fixes ABC-9"
        assert extract_tickets(text) == extract_tickets(text) == ["SC-1234", "ABC-9"]


class TestExtractTicketFromBranch:
    """Tests for extract_ticket_from_branch function."""

    def test_prefixed_branch(self):
        """Test ticket after a path separator."""
        assert extract_ticket_from_branch("feature/SC-1234") == "SC-1234"

    def test_prefixed_branch_with_description(self):
        """Test ticket followed by a description."""
        assert extract_ticket_from_branch("bugfix/SC-1234-fix-something") == "SC-1234"

    def test_ticket_at_start(self):
        """Test ticket at the start of the branch name."""
        assert extract_ticket_from_branch("SC-1234-description") == "SC-1234"

    def test_lowercase_branch(self):
        """Test lowercase branch names are normalized."""
        assert extract_ticket_from_branch("feature/sc-55-login") == "SC-55"

    def test_no_ticket(self):
        """Test branch without a ticket."""
        assert extract_ticket_from_branch("main") is None
        assert extract_ticket_from_branch("") is None
        assert extract_ticket_from_branch(None) is None


class TestContainsTicket:
    """Tests for contains_ticket function."""

    def test_detects_ticket(self):
        """Test detection of a ticket key."""
        assert contains_ticket("Merge ABC-42 into main") is True

    def test_no_ticket(self):
        """Test text without a ticket key."""
        assert contains_ticket("Merge branch main") is False
        assert contains_ticket(None) is False

    def test_repeated_calls_same_answer(self):
        """Test the shared pattern keeps no state between calls."""
        results = [contains_ticket("ABC-42") for _ in range(5)]
        assert results == [True] * 5


class TestTicketUrls:
    """Tests for ticket URL helpers."""

    def test_url_with_base(self):
        """Test URL built from an explicit base."""
        assert get_ticket_url("SC-1", BASE_URL) == f"{BASE_URL}/SC-1"

    def test_trailing_slash_stripped(self):
        """Test trailing slash on the base is not duplicated."""
        assert get_ticket_url("SC-1", BASE_URL + "/") == f"{BASE_URL}/SC-1"

    def test_default_base(self):
        """Test the default base URL is used when none is given."""
        assert get_ticket_url("SC-1") == "https://jira.atlassian.net/browse/SC-1"

    def test_env_var_base(self):
        """Test the environment variable overrides the default base."""
        with patch.dict(os.environ, {"STANDUPNOTE_TICKET_BASE_URL": "https://linear.app/acme/issue"}):
            assert get_ticket_url("ENG-3") == "https://linear.app/acme/issue/ENG-3"

    def test_extract_with_urls(self):
        """Test keys are returned with their URLs."""
        links = extract_tickets_with_urls("ABC-1 and DEF-2", BASE_URL)
        assert links == [
            TicketLink("ABC-1", f"{BASE_URL}/ABC-1"),
            TicketLink("DEF-2", f"{BASE_URL}/DEF-2"),
        ]

    def test_format_ticket_id(self):
        """Test display formatting."""
        assert format_ticket_id("sc-9") == "SC-9"


class TestExtractAllTickets:
    """Tests for extract_all_tickets function."""

    def test_priority_order(self):
        """Test branch tickets come before PR title and commit message tickets."""
        links = extract_all_tickets(
            branch_name="feature/BR-1-thing",
            pr_title="PR-2: Title",
            commit_messages=["MSG-3 first", "MSG-4 second"],
            base_url=BASE_URL,
        )
        assert [link.ticket_id for link in links] == ["BR-1", "PR-2", "MSG-3", "MSG-4"]

    def test_deduplicates_across_sources(self):
        """Test a ticket found in several sources is reported once."""
        links = extract_all_tickets(
            branch_name="feature/ABC-1",
            pr_title="ABC-1 title",
            commit_messages=["abc-1 commit"],
            base_url=BASE_URL,
        )
        assert links == [TicketLink("ABC-1", f"{BASE_URL}/ABC-1")]

    def test_no_sources(self):
        """Test empty input."""
        assert extract_all_tickets() == []


class TestIsTicketBranch:
    """Tests for is_ticket_branch function."""

    def test_prefixed_branch(self):
        """Test feature-style prefixes."""
        assert is_ticket_branch("feature/new-ui") is True
        assert is_ticket_branch("hotfix/crash") is True

    def test_branch_with_ticket(self):
        """Test branch names containing a ticket."""
        assert is_ticket_branch("SC-12-cleanup") is True

    def test_plain_branch(self):
        """Test non-ticket branches."""
        assert is_ticket_branch("main") is False
        assert is_ticket_branch(None) is False


class TestTicketsForCommit:
    """Tests for tickets_for_commit function."""

    def test_branch_before_message(self):
        """Test the commit's branch ticket is listed first."""
        commit = make_commit("abc", "DEF-2 tidy", branch_name="feature/ABC-1")
        assert tickets_for_commit(commit) == ["ABC-1", "DEF-2"]

    def test_pull_request_head_branch(self):
        """Test the PR head branch contributes a ticket."""
        pr = PullRequestRef(number=1, head_branch="feature/PRJ-5-export")
        commit = make_commit("abc", "Add export", pull_request=pr)
        assert tickets_for_commit(commit) == ["PRJ-5"]

    def test_same_ticket_in_branch_and_message(self):
        """Test a ticket in both branch and message is listed once."""
        commit = make_commit("abc", "ABC-12: fix", branch_name="feature/ABC-12")
        assert tickets_for_commit(commit) == ["ABC-12"]

    def test_no_tickets(self):
        """Test a commit with no ticket anywhere."""
        assert tickets_for_commit(make_commit("abc", "Update README")) == []
