"""OpenAI provider implementation."""

import openai
from openai import OpenAI

from standupnote.config import LLMProvider
from standupnote.llm.base import (
    BaseLLMProvider,
    ConnectionTestResult,
    RawLLMResult,
    vendor_error_message,
)
from standupnote.llm.exceptions import ProviderRequestError


class OpenAIProvider(BaseLLMProvider):
    """OpenAI chat completions provider."""

    provider = LLMProvider.OPENAI
    display_name = "OpenAI"

    def _client(self) -> OpenAI:
        # Retries are left to the caller
        return OpenAI(
            api_key=self.get_api_key(),
            max_retries=0,
            timeout=self.settings.timeout,
        )

    @staticmethod
    def _extract_text(response) -> str:
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def generate_raw(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Generate a raw response using OpenAI chat completions."""
        client = self._client()

        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
                response_format={"type": "json_object"},
            )
        except openai.APIStatusError as e:
            raise ProviderRequestError(
                vendor_error_message(e.body) or "OpenAI API request failed",
                provider=self.provider.value,
                status_code=e.status_code,
            ) from e
        except openai.OpenAIError as e:
            raise self._request_failed(e) from e

        return RawLLMResult(
            provider=self.provider,
            raw_response=self._extract_text(response),
            model=self.model,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
        )

    def test_connection(self) -> ConnectionTestResult:
        """Check the API key by listing models."""
        client = self._client()

        try:
            client.models.list()
        except openai.APIStatusError as e:
            return ConnectionTestResult(
                success=False,
                error=vendor_error_message(e.body) or f"API returned status {e.status_code}",
            )
        except openai.OpenAIError as e:
            return ConnectionTestResult(success=False, error=f"Failed to connect to OpenAI: {e}")

        return ConnectionTestResult(success=True)
