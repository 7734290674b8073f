"""Base classes and shared utilities for LLM providers."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import standupnote.config as _config
from standupnote.config import LLMProvider
from standupnote.llm.exceptions import LLMError, MissingAPIKeyError
from standupnote.llm.parsing import parse_summary_response
from standupnote.llm.prompts import SYSTEM_PROMPT
from standupnote.models import Commit, SummaryResult, TicketGroup


@dataclass
class GenerationSettings:
    """Request knobs shared by every provider.

    Attributes:
        max_tokens: Output token budget.
        temperature: Sampling temperature; low but non-zero.
        timeout: Request timeout in seconds.
    """

    max_tokens: int = field(default_factory=lambda: _config.MAX_TOKENS)
    temperature: float = field(default_factory=lambda: _config.TEMPERATURE)
    timeout: float = field(default_factory=lambda: _config.TIMEOUT)


@dataclass
class RawLLMResult:
    """Raw text generated by a provider, tagged with the provider it came from."""

    provider: LLMProvider
    raw_response: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class LLMResult:
    """Result from an LLM generation call, including token usage."""

    summary: SummaryResult
    model: str
    input_tokens: int
    output_tokens: int
    raw_response: str = ""


@dataclass
class ConnectionTestResult:
    """Outcome of an API key check."""

    success: bool
    error: Optional[str] = None


@dataclass
class SummaryGeneration:
    """Output of the summary pipeline.

    Groups and orphans are returned so callers can render them
    independently of the LLM response.
    """

    summary: SummaryResult
    groups: list[TicketGroup] = field(default_factory=list)
    orphans: list[Commit] = field(default_factory=list)
    prompt: str = ""
    model: Optional[str] = None
    input_tokens: int = 0
    output_tokens: int = 0


def vendor_error_message(body: Any) -> Optional[str]:
    """Extract the error message from a vendor error body.

    Handles {"error": {"message": ...}}, {"message": ...} and
    {"error": "..."} shapes.

    Returns:
        The message, or None if the body has none.
    """
    if not isinstance(body, dict):
        return None

    error = body.get("error", body)
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message
    elif isinstance(error, str) and error.strip():
        return error
    return None


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses issue the vendor request and report where the generated
    text lives; JSON extraction and normalization are shared.
    """

    provider: LLMProvider
    display_name: str

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        settings: Optional[GenerationSettings] = None,
    ):
        """Initialize the provider.

        Args:
            model: The model to use. Defaults to the configured model for this provider.
            api_key: Explicit credential. Falls back to the environment and credentials file.
            settings: Token budget, temperature and timeout.
        """
        self.model = model or _config.get_default_model(self.provider)
        self.api_key = api_key
        self.settings = settings or GenerationSettings()
        self.api_key_env_var = _config.get_api_key_env_var(self.provider)

    def get_api_key(self) -> str:
        """Get the API key.

        Checks in order:
        1. Key passed to the constructor
        2. Environment variable
        3. ~/.standupnote/credentials file

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        if self.api_key:
            return self.api_key

        api_key = os.getenv(self.api_key_env_var)
        if api_key:
            return api_key

        from standupnote.global_config import get_credential

        api_key = get_credential(self.api_key_env_var)
        if api_key:
            return api_key

        raise MissingAPIKeyError(
            f"No API key configured for {self.display_name}. Set it using:\n"
            f"  1. Environment variable: export {self.api_key_env_var}=your_key_here\n"
            f"  2. Run: standupnote config set-key {self.provider.value}\n"
            f"  3. Manually add to ~/.standupnote/credentials"
        )

    @abstractmethod
    def generate_raw(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Send one request and return the generated text.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            ProviderRequestError: If the vendor returns an error response.
            LLMError: For connection and other request failures.
        """
        pass

    @abstractmethod
    def test_connection(self) -> ConnectionTestResult:
        """Check that the API key is accepted by the vendor.

        Raises:
            MissingAPIKeyError: If the API key is not set.
        """
        pass

    def generate(self, prompt: str) -> LLMResult:
        """Generate a stand-up summary for a prompt.

        Args:
            prompt: The user prompt built by standupnote.prompt.

        Returns:
            An LLMResult with the normalized summary. Malformed model output
            degrades to a summary holding the raw text.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            ProviderRequestError: If the vendor returns an error response.
            LLMError: For connection and other request failures.
        """
        raw = self.generate_raw(SYSTEM_PROMPT, prompt)
        return LLMResult(
            summary=parse_summary_response(raw.raw_response),
            model=raw.model,
            input_tokens=raw.input_tokens,
            output_tokens=raw.output_tokens,
            raw_response=raw.raw_response,
        )

    def _request_failed(self, e: Exception) -> LLMError:
        return LLMError(f"{self.display_name} API call failed: {e}")
