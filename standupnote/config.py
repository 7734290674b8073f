"""Configuration for standupnote LLM providers and ticket links.

Configuration is loaded from ~/.standupnote/config.yaml
Use 'standupnote config' commands to modify settings.
"""

import os
from enum import Enum


class LLMProvider(Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


# ============================================================
# DEFAULT FALLBACK VALUES
# ============================================================
# These are used only if ~/.standupnote/config.yaml doesn't exist

DEFAULT_PROVIDER = LLMProvider.OPENAI
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.3
DEFAULT_TIMEOUT = 120.0
DEFAULT_TICKET_BASE_URL = "https://jira.atlassian.net/browse"

# Environment variable overriding the ticket link base URL
TICKET_BASE_URL_ENV_VAR = "STANDUPNOTE_TICKET_BASE_URL"

DEFAULT_MODELS = {
    LLMProvider.OPENAI: "gpt-4o-mini",
    LLMProvider.ANTHROPIC: "claude-sonnet-4-20250514",
    LLMProvider.GOOGLE: "gemini-2.0-flash",
}


# ============================================================
# ACTIVE CONFIGURATION (loaded from global config)
# ============================================================

# Initially set to defaults - will be overridden by load_config()
ACTIVE_PROVIDER = DEFAULT_PROVIDER
ACTIVE_MODEL = None
MAX_TOKENS = DEFAULT_MAX_TOKENS
TEMPERATURE = DEFAULT_TEMPERATURE
TIMEOUT = DEFAULT_TIMEOUT
TICKET_BASE_URL = None


def load_config():
    """Load configuration from global config file.

    This should be called by the CLI before using the LLM.

    Raises:
        GlobalConfigError: If a generation setting is not a positive number.
    """
    global ACTIVE_PROVIDER, ACTIVE_MODEL, MAX_TOKENS, TEMPERATURE, TIMEOUT, TICKET_BASE_URL

    # Import here to avoid circular dependency
    from standupnote import global_config

    provider = global_config.get_active_provider()
    model = global_config.get_active_model()
    max_tokens = global_config.get_max_tokens()
    temperature = global_config.get_temperature()
    timeout = global_config.get_timeout()
    ticket_base_url = global_config.get_ticket_base_url()

    if provider:
        ACTIVE_PROVIDER = provider
    if model:
        ACTIVE_MODEL = model
    if max_tokens is not None:
        MAX_TOKENS = max_tokens
    if temperature is not None:
        TEMPERATURE = temperature
    if timeout is not None:
        TIMEOUT = timeout
    if ticket_base_url:
        TICKET_BASE_URL = ticket_base_url


def get_ticket_base_url() -> str:
    """Get the base URL used to build ticket links.

    Checks in order:
    1. STANDUPNOTE_TICKET_BASE_URL environment variable
    2. ticket_base_url from ~/.standupnote/config.yaml (after load_config())
    3. DEFAULT_TICKET_BASE_URL

    Returns:
        The base URL string.
    """
    return os.getenv(TICKET_BASE_URL_ENV_VAR) or TICKET_BASE_URL or DEFAULT_TICKET_BASE_URL


def get_default_model(provider: LLMProvider) -> str:
    """Get the model to use for a provider.

    The configured model only applies to the configured provider.

    Args:
        provider: The LLM provider.

    Returns:
        The model name.
    """
    if ACTIVE_MODEL and provider == ACTIVE_PROVIDER:
        return ACTIVE_MODEL
    return DEFAULT_MODELS[provider]


# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================

AVAILABLE_MODELS = {
    LLMProvider.OPENAI: [
        "gpt-4o-mini",
        "gpt-4o",
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
    ],
    LLMProvider.ANTHROPIC: [
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
    ],
    LLMProvider.GOOGLE: [
        "gemini-2.0-flash",
        "gemini-2.0-flash-lite",
        "gemini-2.5-flash",
        "gemini-2.5-pro",
    ],
}

# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

API_KEY_ENV_VARS = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.GOOGLE: "GOOGLE_API_KEY",
}


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name.
    """
    return API_KEY_ENV_VARS[provider]
