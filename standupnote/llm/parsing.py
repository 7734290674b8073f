"""JSON parsing and normalization utilities for LLM responses.

Contains functions for turning free model text into a SummaryResult:
- strip_code_fences: Remove markdown code fences around a response
- extract_json_object: Find the outermost {...} span in a response
- parse_json_response: Strictly parse a response as a JSON object
- normalize_summary: Coerce a parsed dict into a SummaryResult
- parse_summary_response: Best-effort SummaryResult that never raises
"""

import json
import logging
import re
from typing import Any, Optional

from standupnote.llm.exceptions import JSONParseError
from standupnote.models import SummaryResult, TicketSummary

logger = logging.getLogger(__name__)

# Length of raw text kept as the summary when nothing can be parsed
FALLBACK_SUMMARY_CHARS = 500
FALLBACK_SUMMARY = "Unable to generate summary"

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")


def strip_code_fences(raw_response: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    cleaned = raw_response.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def extract_json_object(text: str) -> Optional[str]:
    """Return the span from the first { to the last }, or None."""
    first_brace = text.find("{")
    last_brace = text.rfind("}")

    if first_brace == -1 or last_brace <= first_brace:
        return None
    return text[first_brace:last_brace + 1]


def parse_json_response(raw_response: str) -> dict:
    """Parse the LLM response as a JSON object.

    The outermost {...} span is tried first, then the whole cleaned text.

    Args:
        raw_response: The raw text response from the LLM.

    Returns:
        The parsed JSON as a dictionary.

    Raises:
        JSONParseError: If no JSON object can be parsed.
    """
    cleaned = strip_code_fences(raw_response or "")

    candidates = []
    span = extract_json_object(cleaned)
    if span is not None:
        candidates.append(span)
    candidates.append(cleaned)

    error: Optional[Exception] = None
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as e:
            error = e
            continue
        if isinstance(parsed, dict):
            return parsed
        error = ValueError(f"expected a JSON object, got {type(parsed).__name__}")

    raise JSONParseError(
        f"Failed to parse LLM response as JSON.\n"
        f"Error: {error}\n"
        f"Raw response:\n{raw_response}"
    )


def _string_list(value: Any) -> list[str]:
    """Coerce a value into a list of strings; non-lists become []."""
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if isinstance(item, str):
            items.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            items.append(str(item))
    return items


def _optional_string_list(value: Any) -> Optional[list[str]]:
    if value is None:
        return None
    return _string_list(value)


def _ticket_summaries(value: Any) -> list[TicketSummary]:
    """Coerce the tickets array, skipping entries without a ticket ID."""
    if not isinstance(value, list):
        return []

    tickets = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        ticket_id = entry.get("ticketId", entry.get("ticket_id"))
        if not isinstance(ticket_id, str) or not ticket_id.strip():
            continue
        summary = entry.get("summary")
        tickets.append(
            TicketSummary(
                ticket_id=ticket_id.strip(),
                summary=summary if isinstance(summary, str) else "",
                bullet_points=_string_list(entry.get("bulletPoints", entry.get("bullet_points"))),
                code_insights=_optional_string_list(entry.get("codeInsights", entry.get("code_insights"))),
                files_changed=_optional_string_list(entry.get("filesChanged", entry.get("files_changed"))),
            )
        )
    return tickets


def normalize_summary(parsed: dict) -> SummaryResult:
    """Coerce a parsed response into a SummaryResult.

    Every field is coerced independently: missing or non-list arrays
    become empty lists, and a missing overview becomes "".

    Args:
        parsed: The parsed JSON dictionary.

    Returns:
        A SummaryResult.
    """
    summary = parsed.get("summary")
    return SummaryResult(
        summary=summary if isinstance(summary, str) else "",
        bullet_points=_string_list(parsed.get("bulletPoints", parsed.get("bullet_points"))),
        highlights=_string_list(parsed.get("highlights")),
        tickets=_ticket_summaries(parsed.get("tickets")),
        untracked=_string_list(parsed.get("untracked")),
    )


def fallback_summary(raw_response: Optional[str]) -> SummaryResult:
    """Build a SummaryResult from unparseable text."""
    text = (raw_response or "").strip()
    return SummaryResult.empty(text[:FALLBACK_SUMMARY_CHARS] or FALLBACK_SUMMARY)


def parse_summary_response(raw_response: Optional[str]) -> SummaryResult:
    """Parse a model reply into a SummaryResult without ever raising.

    Args:
        raw_response: The text generated by the model.

    Returns:
        The normalized SummaryResult, or a result whose summary is the
        first 500 characters of the raw text when no JSON can be parsed.
    """
    try:
        parsed = parse_json_response(raw_response or "")
    except JSONParseError:
        logger.warning("LLM response is not valid JSON; using raw text as summary")
        return fallback_summary(raw_response)
    return normalize_summary(parsed)
