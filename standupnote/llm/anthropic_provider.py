"""Anthropic Claude provider implementation."""

import anthropic
from anthropic import Anthropic

from standupnote.config import LLMProvider
from standupnote.llm.base import (
    BaseLLMProvider,
    ConnectionTestResult,
    RawLLMResult,
    vendor_error_message,
)
from standupnote.llm.exceptions import ProviderRequestError


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude LLM provider."""

    provider = LLMProvider.ANTHROPIC
    display_name = "Anthropic"

    def _client(self) -> Anthropic:
        return Anthropic(
            api_key=self.get_api_key(),
            max_retries=0,
            timeout=self.settings.timeout,
        )

    @staticmethod
    def _extract_text(message) -> str:
        # Concatenate text blocks; other block types carry no summary text
        return "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )

    def _status_error(self, e: anthropic.APIStatusError) -> ProviderRequestError:
        return ProviderRequestError(
            vendor_error_message(e.body) or "Anthropic API request failed",
            provider=self.provider.value,
            status_code=e.status_code,
        )

    def generate_raw(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Generate a raw response using the Anthropic Messages API."""
        client = self._client()

        try:
            message = client.messages.create(
                model=self.model,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIStatusError as e:
            raise self._status_error(e) from e
        except anthropic.AnthropicError as e:
            raise self._request_failed(e) from e

        return RawLLMResult(
            provider=self.provider,
            raw_response=self._extract_text(message),
            model=self.model,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )

    def test_connection(self) -> ConnectionTestResult:
        """Check the API key with a one-token message."""
        client = self._client()

        try:
            client.messages.create(
                model=self.model,
                max_tokens=1,
                messages=[{"role": "user", "content": "Hi"}],
            )
        except anthropic.APIStatusError as e:
            return ConnectionTestResult(
                success=False,
                error=vendor_error_message(e.body) or f"API returned status {e.status_code}",
            )
        except anthropic.AnthropicError as e:
            return ConnectionTestResult(success=False, error=f"Failed to connect to Anthropic: {e}")

        return ConnectionTestResult(success=True)
