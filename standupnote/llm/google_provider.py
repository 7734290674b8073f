"""Google Gemini provider implementation."""

import logging

from google import genai
from google.genai import errors, types

from standupnote.config import LLMProvider
from standupnote.llm.base import (
    BaseLLMProvider,
    ConnectionTestResult,
    RawLLMResult,
)
from standupnote.llm.exceptions import ProviderRequestError

logger = logging.getLogger(__name__)

# Models that have built-in "thinking" which consumes output tokens
# These models use internal reasoning that counts against max_output_tokens
# even without explicit thinking config, so we need a higher budget
THINKING_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash-thinking",
]

# Multiplier for max_output_tokens on thinking models
THINKING_TOKEN_MULTIPLIER = 3


class GoogleProvider(BaseLLMProvider):
    """Google Gemini LLM provider."""

    provider = LLMProvider.GOOGLE
    display_name = "Google Gemini"

    def _client(self) -> genai.Client:
        # HttpOptions.timeout is in milliseconds
        return genai.Client(
            api_key=self.get_api_key(),
            http_options=types.HttpOptions(timeout=int(self.settings.timeout * 1000)),
        )

    def _is_thinking_model(self) -> bool:
        """Check if the current model is a thinking model."""
        return any(thinking_model in self.model.lower() for thinking_model in THINKING_MODELS)

    @staticmethod
    def _extract_text(response) -> str:
        """Return the text of the first candidate, or "" when there is none."""
        if not response.candidates:
            logger.warning("Google Gemini returned no candidates in response")
            return ""

        candidate = response.candidates[0]
        finish_reason = str(getattr(candidate, "finish_reason", "") or "")
        if "SAFETY" in finish_reason:
            logger.warning("Google Gemini blocked response due to safety filters: %s", finish_reason)
        elif "MAX_TOKENS" in finish_reason:
            logger.warning("Google Gemini response was truncated due to max tokens limit")

        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or []
        return "".join(part.text for part in parts if getattr(part, "text", None))

    def generate_raw(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Generate a raw response using Google Gemini."""
        client = self._client()

        # Thinking consumes tokens from max_output_tokens without appearing in the output
        max_output_tokens = self.settings.max_tokens
        if self._is_thinking_model():
            max_output_tokens = self.settings.max_tokens * THINKING_TOKEN_MULTIPLIER

        try:
            response = client.models.generate_content(
                model=self.model,
                contents=user_prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    max_output_tokens=max_output_tokens,
                    temperature=self.settings.temperature,
                    response_mime_type="application/json",
                ),
            )
        except errors.APIError as e:
            raise ProviderRequestError(
                e.message or "Google Gemini API request failed",
                provider=self.provider.value,
                status_code=e.code,
            ) from e
        except Exception as e:
            raise self._request_failed(e) from e

        raw_response = self._extract_text(response)

        input_tokens = 0
        output_tokens = 0
        usage = getattr(response, "usage_metadata", None)
        if usage:
            input_tokens = usage.prompt_token_count or 0
            output_tokens = (usage.candidates_token_count or 0) + (usage.thoughts_token_count or 0)

        return RawLLMResult(
            provider=self.provider,
            raw_response=raw_response,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    def test_connection(self) -> ConnectionTestResult:
        """Check the API key by listing models."""
        client = self._client()

        try:
            next(iter(client.models.list()), None)
        except errors.APIError as e:
            return ConnectionTestResult(
                success=False,
                error=e.message or f"API returned status {e.code}",
            )
        except Exception as e:
            return ConnectionTestResult(success=False, error=f"Failed to connect to Google Gemini: {e}")

        return ConnectionTestResult(success=True)
