"""LLM prompt templates for stand-up summary generation.

This package contains:
- system: The shared system prompt for all providers
- standup: The user prompt template and JSON response schema
"""

from standupnote.llm.prompts.system import SYSTEM_PROMPT
from standupnote.llm.prompts.standup import (
    NO_TICKET_HEADING,
    RESPONSE_FIELD_DESCRIPTIONS,
    TICKET_FIELD_DESCRIPTIONS,
    USER_PROMPT_TEMPLATE_STANDUP,
)


__all__ = [
    "SYSTEM_PROMPT",
    "USER_PROMPT_TEMPLATE_STANDUP",
    "NO_TICKET_HEADING",
    "RESPONSE_FIELD_DESCRIPTIONS",
    "TICKET_FIELD_DESCRIPTIONS",
]
