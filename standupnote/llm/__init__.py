"""LLM provider module for standupnote.

This module provides a unified interface to the supported LLM providers
and the summary pipeline: group commits by ticket, build the prompt,
call the provider once and normalize its reply.
"""

from typing import Optional, Sequence, Union

from dotenv import load_dotenv

import standupnote.config as _config
from standupnote.config import LLMProvider
from standupnote.llm.base import (
    BaseLLMProvider,
    ConnectionTestResult,
    GenerationSettings,
    LLMResult,
    RawLLMResult,
    SummaryGeneration,
)
from standupnote.llm.exceptions import (
    JSONParseError,
    LLMError,
    MissingAPIKeyError,
    ProviderRequestError,
    UnsupportedProviderError,
)
from standupnote.models import Commit, SummaryResult, TicketGroup

# Load environment variables from .env file
load_dotenv()

NO_ACTIVITY_SUMMARY = "No commits found for the previous working day."


def resolve_provider(provider: Union[LLMProvider, str, None]) -> LLMProvider:
    """Turn a provider selector into an LLMProvider.

    Args:
        provider: An LLMProvider, its string value, or None for the active provider.

    Raises:
        UnsupportedProviderError: If the selector is unknown.
    """
    if provider is None:
        return _config.ACTIVE_PROVIDER
    if isinstance(provider, LLMProvider):
        return provider
    try:
        return LLMProvider(str(provider).lower())
    except ValueError:
        raise UnsupportedProviderError(f"Unsupported LLM provider: {provider}") from None


def get_provider(
    provider: Union[LLMProvider, str, None] = None,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    settings: Optional[GenerationSettings] = None,
) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        provider: The provider to use. Defaults to ACTIVE_PROVIDER from config.
        model: The model to use. Defaults to the provider's configured model.
        api_key: Explicit credential for the provider.
        settings: Token budget, temperature and timeout.

    Returns:
        An instance of the appropriate LLM provider.

    Raises:
        UnsupportedProviderError: If the provider is not supported.
    """
    provider = resolve_provider(provider)

    if provider == LLMProvider.OPENAI:
        from standupnote.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(model=model, api_key=api_key, settings=settings)

    elif provider == LLMProvider.ANTHROPIC:
        from standupnote.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=model, api_key=api_key, settings=settings)

    elif provider == LLMProvider.GOOGLE:
        from standupnote.llm.google_provider import GoogleProvider

        return GoogleProvider(model=model, api_key=api_key, settings=settings)

    else:
        raise UnsupportedProviderError(f"Unsupported LLM provider: {provider}")


def generate_summary(
    commits: Sequence[Commit],
    provider: Union[LLMProvider, str, None] = None,
    api_key: Optional[str] = None,
    groups: Optional[Sequence[TicketGroup]] = None,
    base_url: Optional[str] = None,
    model: Optional[str] = None,
    settings: Optional[GenerationSettings] = None,
) -> SummaryGeneration:
    """Generate a stand-up summary for a list of commits.

    This is the main entry point of the summary pipeline. Configuration
    problems fail before any network call, and an empty commit list
    returns a canned result without calling the provider.

    Args:
        commits: Commits of the period, optionally carrying diffs.
        provider: Vendor selector (openai, anthropic, google).
        api_key: Credential; falls back to the environment and credentials file.
        groups: Pre-computed ticket groups. Commits are grouped internally when omitted.
        base_url: Base URL for ticket links.
        model: Model override.
        settings: Token budget, temperature and timeout.

    Returns:
        A SummaryGeneration with the normalized summary, the ticket groups
        and the orphan commits.

    Raises:
        UnsupportedProviderError: If the provider is not supported.
        MissingAPIKeyError: If no API key is available.
        ProviderRequestError: If the vendor returns an error response.
        LLMError: For other request failures.
    """
    from standupnote.prompt import PromptOptions, build_grouped_prompt, resolve_grouping

    llm = get_provider(provider, model=model, api_key=api_key, settings=settings)
    llm.get_api_key()

    if not commits:
        return SummaryGeneration(summary=SummaryResult.empty(NO_ACTIVITY_SUMMARY))

    options = PromptOptions(base_url=base_url)
    grouping = resolve_grouping(commits, groups, options)
    prompt = build_grouped_prompt(grouping, options)

    result = llm.generate(prompt)

    return SummaryGeneration(
        summary=result.summary,
        groups=grouping.groups,
        orphans=grouping.orphans,
        prompt=prompt,
        model=result.model,
        input_tokens=result.input_tokens,
        output_tokens=result.output_tokens,
    )


# Export commonly used items
__all__ = [
    "BaseLLMProvider",
    "ConnectionTestResult",
    "GenerationSettings",
    "LLMError",
    "LLMResult",
    "RawLLMResult",
    "MissingAPIKeyError",
    "JSONParseError",
    "ProviderRequestError",
    "UnsupportedProviderError",
    "SummaryGeneration",
    "NO_ACTIVITY_SUMMARY",
    "resolve_provider",
    "get_provider",
    "generate_summary",
]
