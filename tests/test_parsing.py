"""Tests for standupnote.llm.parsing module."""

import pytest

from standupnote.llm.exceptions import JSONParseError
from standupnote.llm.parsing import (
    FALLBACK_SUMMARY,
    extract_json_object,
    normalize_summary,
    parse_json_response,
    parse_summary_response,
    strip_code_fences,
)


class TestStripCodeFences:
    """Tests for strip_code_fences function."""

    def test_json_fence(self):
        """Test ```json fences are removed."""
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        """Test bare ``` fences are removed."""
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        """Test text without fences is only stripped."""
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


class TestExtractJsonObject:
    """Tests for extract_json_object function."""

    def test_embedded_object(self):
        """Test the outermost braces are found inside prose."""
        assert extract_json_object('Sure! {"a": {"b": 1}} Hope that helps') == '{"a": {"b": 1}}'

    def test_no_object(self):
        """Test text without braces."""
        assert extract_json_object("no json here") is None
        assert extract_json_object("} backwards {") is None


class TestParseJsonResponse:
    """Tests for parse_json_response function."""

    def test_valid_json(self, sample_llm_response, sample_summary_dict):
        """Test plain JSON."""
        assert parse_json_response(sample_llm_response) == sample_summary_dict

    def test_fenced_json(self, sample_llm_response_with_markdown, sample_summary_dict):
        """Test JSON wrapped in markdown fences."""
        assert parse_json_response(sample_llm_response_with_markdown) == sample_summary_dict

    def test_json_with_prose(self):
        """Test JSON surrounded by prose."""
        assert parse_json_response('Here it is:\n{"summary": "x"}\nThanks') == {"summary": "x"}

    def test_invalid_json_raises(self):
        """Test unparseable text raises JSONParseError with the raw text."""
        with pytest.raises(JSONParseError) as exc_info:
            parse_json_response("not json at all")
        assert "Failed to parse LLM response as JSON" in str(exc_info.value)
        assert "not json at all" in str(exc_info.value)

    def test_array_raises(self):
        """Test a JSON array is not accepted."""
        with pytest.raises(JSONParseError):
            parse_json_response('["a", "b"]')


class TestNormalizeSummary:
    """Tests for normalize_summary function."""

    def test_full_response(self, sample_summary_dict):
        """Test every field is carried over."""
        result = normalize_summary(sample_summary_dict)

        assert result.summary == "Fixed the login redirect and shipped CSV export."
        assert result.bullet_points == ["Login fix merged"]
        assert result.highlights == ["CSV export shipped"]
        assert result.untracked == ["Bumped dependencies"]
        assert len(result.tickets) == 1
        ticket = result.tickets[0]
        assert ticket.ticket_id == "ABC-12"
        assert ticket.bullet_points == ["Reset the session cookie on logout"]
        assert ticket.code_insights == ["Redirect target is now validated"]
        assert ticket.files_changed == ["app/auth.py"]

    def test_non_list_fields_become_empty(self):
        """Test malformed array fields are coerced to []."""
        result = normalize_summary({
            "summary": "ok",
            "bulletPoints": "not a list",
            "highlights": None,
            "tickets": {"ticketId": "ABC-1"},
            "untracked": 3,
        })

        assert result.summary == "ok"
        assert result.bullet_points == []
        assert result.highlights == []
        assert result.tickets == []
        assert result.untracked == []

    def test_missing_summary_is_empty(self):
        """Test a missing overview becomes an empty string."""
        assert normalize_summary({"highlights": ["x"]}).summary == ""

    def test_non_string_items_dropped(self):
        """Test objects inside string arrays are skipped and numbers kept as text."""
        result = normalize_summary({"summary": "s", "bulletPoints": ["a", {"b": 1}, 2, None]})
        assert result.bullet_points == ["a", "2"]

    def test_ticket_entries_without_id_skipped(self):
        """Test ticket entries need a ticket ID."""
        result = normalize_summary({
            "summary": "s",
            "tickets": [
                {"summary": "no id"},
                "not an object",
                {"ticket_id": " DEF-2 ", "summary": "snake case", "bullet_points": ["x"]},
            ],
        })

        assert [t.ticket_id for t in result.tickets] == ["DEF-2"]
        assert result.tickets[0].bullet_points == ["x"]
        assert result.tickets[0].code_insights is None

    def test_camel_case_dump(self, sample_summary_dict):
        """Test the result serializes with camelCase keys."""
        dumped = normalize_summary(sample_summary_dict).model_dump(by_alias=True)
        assert dumped == sample_summary_dict


class TestParseSummaryResponse:
    """Tests for parse_summary_response function."""

    def test_fenced_matches_plain(self, sample_llm_response, sample_llm_response_with_markdown):
        """Test fenced and plain replies give the same result."""
        assert parse_summary_response(sample_llm_response_with_markdown) == parse_summary_response(
            sample_llm_response
        )

    def test_prose_falls_back_to_raw_text(self):
        """Test plain prose becomes the summary with empty lists."""
        result = parse_summary_response("Yesterday I fixed the login bug.")

        assert result.summary == "Yesterday I fixed the login bug."
        assert result.bullet_points == []
        assert result.highlights == []
        assert result.tickets == []
        assert result.untracked == []

    def test_fallback_truncated(self):
        """Test long unparseable text is cut to 500 characters."""
        result = parse_summary_response("x" * 800)
        assert result.summary == "x" * 500

    def test_empty_response(self):
        """Test an empty reply gets the fixed fallback text."""
        assert parse_summary_response("").summary == FALLBACK_SUMMARY
        assert parse_summary_response(None).summary == FALLBACK_SUMMARY

    def test_fallback_logged(self, caplog):
        """Test the fallback is logged as a warning."""
        with caplog.at_level("WARNING", logger="standupnote.llm.parsing"):
            parse_summary_response("plain text")
        assert "not valid JSON" in caplog.text
