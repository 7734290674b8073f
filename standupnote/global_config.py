"""Global configuration management for standupnote.

Handles user-level configuration stored in ~/.standupnote/:
- config.yaml: Provider, model, ticket link and generation settings
- credentials: API keys for LLM providers and GitHub
"""

import os
import stat
from pathlib import Path
from typing import Dict, Optional, Any

import yaml

from standupnote.config import LLMProvider


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".standupnote"


def get_global_config_dir() -> Path:
    """Get the global standupnote configuration directory.

    Returns:
        Path to ~/.standupnote/
    """
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists.

    Returns:
        Path to ~/.standupnote/
    """
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    """Get path to config.yaml file."""
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    """Get path to credentials file."""
    return get_global_config_dir() / "credentials"


def load_global_config() -> Dict[str, Any]:
    """Load global configuration from ~/.standupnote/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.

    Raises:
        GlobalConfigError: If the file exists but cannot be read or parsed.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Config file {config_file} must contain a mapping")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to ~/.standupnote/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}") from e


def _read_credentials_file(credentials_file: Path) -> Dict[str, str]:
    credentials = {}
    with open(credentials_file, "r") as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            # Parse KEY=value format
            if "=" in line:
                key, value = line.split("=", 1)
                credentials[key.strip()] = value.strip()
    return credentials


def load_credentials() -> Dict[str, str]:
    """Load API keys from ~/.standupnote/credentials.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    try:
        return _read_credentials_file(credentials_file)
    except OSError as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}") from e


def save_credential(key_name: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    Args:
        key_name: Environment variable name (e.g., "OPENAI_API_KEY")
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    existing_creds = load_credentials()
    existing_creds[key_name] = api_key

    try:
        with open(credentials_file, "w") as f:
            f.write("# standupnote API credentials\n")
            f.write("# Format: PROVIDER_API_KEY=your_key_here\n\n")

            for key, value in existing_creds.items():
                f.write(f"{key}={value}\n")

        # Owner read/write only
        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)

    except OSError as e:
        raise GlobalConfigError(f"Failed to save credential: {e}") from e


def get_credential(key_name: str) -> Optional[str]:
    """Get an API key from credentials file.

    Args:
        key_name: Environment variable name (e.g., "ANTHROPIC_API_KEY")

    Returns:
        The API key if found, None otherwise.
    """
    return load_credentials().get(key_name)


def get_active_provider() -> Optional[LLMProvider]:
    """Get the active LLM provider from global config.

    Returns:
        LLMProvider enum value, or None if not configured or unknown.
    """
    provider_str = load_global_config().get("provider")

    if not provider_str:
        return None

    try:
        return LLMProvider(provider_str)
    except ValueError:
        return None


def get_active_model() -> Optional[str]:
    """Get the active model from global config."""
    return load_global_config().get("model")


def set_provider_and_model(provider: LLMProvider, model: Optional[str] = None) -> None:
    """Set the active provider and model in global config.

    Args:
        provider: The LLM provider to use.
        model: The model name to use. Removed from config when None.
    """
    config = load_global_config()
    config["provider"] = provider.value
    if model:
        config["model"] = model
    else:
        config.pop("model", None)
    save_global_config(config)


def _get_positive_setting(key: str, kind: type = float) -> Optional[Any]:
    """Get a numeric setting that must be greater than zero.

    Raises:
        GlobalConfigError: If the value is not a positive number of the given kind.
    """
    value = load_global_config().get(key)
    if value is None:
        return None

    valid_types, label = ((int,), "integer") if kind is int else ((int, float), "number")
    if isinstance(value, bool) or not isinstance(value, valid_types) or value <= 0:
        raise GlobalConfigError(f"{key} in {get_config_file_path()} must be a positive {label}, got {value!r}")
    return value


def get_max_tokens() -> Optional[int]:
    """Get max_tokens setting from global config."""
    return _get_positive_setting("max_tokens", int)


def get_temperature() -> Optional[float]:
    """Get temperature setting from global config.

    Zero (greedy decoding) is rejected along with negative values.
    """
    return _get_positive_setting("temperature")


def get_timeout() -> Optional[float]:
    """Get the LLM request timeout in seconds from global config."""
    return _get_positive_setting("timeout")


def get_ticket_base_url() -> Optional[str]:
    """Get the ticket link base URL from global config."""
    return load_global_config().get("ticket_base_url")


def set_ticket_base_url(url: str) -> None:
    """Set the ticket link base URL in global config.

    Args:
        url: Base URL such as https://example.atlassian.net/browse
    """
    config = load_global_config()
    config["ticket_base_url"] = url
    save_global_config(config)


def is_configured() -> bool:
    """Check if standupnote has been configured.

    Returns:
        True if config.yaml exists, False otherwise.
    """
    return get_config_file_path().exists()
