"""LLM-related exception classes.

Contains all exception classes for LLM operations:
- LLMError: Base exception for LLM-related errors
- MissingAPIKeyError: Raised when API key is not set
- UnsupportedProviderError: Raised for an unknown provider selector
- ProviderRequestError: Raised when the vendor API rejects a request
- JSONParseError: Raised when an LLM response cannot be parsed
"""

from typing import Optional


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    pass


class MissingAPIKeyError(LLMError):
    """Raised when the required API key is not set."""

    pass


class UnsupportedProviderError(LLMError, ValueError):
    """Raised when the provider selector is not supported."""

    pass


class ProviderRequestError(LLMError):
    """Raised when the vendor API returns an error response."""

    def __init__(self, message: str, provider: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class JSONParseError(LLMError):
    """Raised when the LLM response cannot be parsed as valid JSON."""

    pass
