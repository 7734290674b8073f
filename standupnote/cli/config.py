"""CLI commands for global configuration management."""

import typer

from standupnote import global_config
from standupnote.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    LLMProvider,
    get_api_key_env_var,
    get_ticket_base_url,
)
from standupnote.github import GITHUB_TOKEN_ENV_VAR

VALID_PROVIDERS = ", ".join(p.value for p in LLMProvider)

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage global standupnote configuration in ~/.standupnote/",
    add_completion=False,
)


def _mask(key: str) -> str:
    return key[:8] + "..." + key[-4:] if len(key) > 12 else "***"


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.lower())
    except ValueError:
        typer.echo(f"Invalid provider: {provider}", err=True)
        typer.echo(f"Valid providers: {VALID_PROVIDERS}")
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current global configuration."""
    try:
        config = global_config.load_global_config()

        if not global_config.is_configured():
            typer.echo("standupnote is not configured yet; showing defaults.")
            typer.echo("Run: standupnote config set-provider <provider>")
            typer.echo()

        typer.echo("Current standupnote configuration (~/.standupnote/config.yaml):")
        typer.echo()
        typer.echo(f"  Provider: {config.get('provider', 'not set')}")
        typer.echo(f"  Model: {config.get('model', 'not set')}")
        typer.echo(f"  Max Tokens: {config.get('max_tokens', DEFAULT_MAX_TOKENS)}")
        typer.echo(f"  Temperature: {config.get('temperature', DEFAULT_TEMPERATURE)}")
        typer.echo(f"  Timeout: {config.get('timeout', DEFAULT_TIMEOUT)}s")
        typer.echo(f"  Ticket URL: {get_ticket_base_url()}")
        typer.echo()

        credentials = global_config.load_credentials()
        for env_var in [*API_KEY_ENV_VARS.values(), GITHUB_TOKEN_ENV_VAR]:
            api_key = credentials.get(env_var)
            typer.echo(f"  {env_var}: {_mask(api_key) if api_key else 'not set'}")

    except global_config.GlobalConfigError as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(
        ...,
        help=f"Provider name ({VALID_PROVIDERS}) or 'github'",
    )
) -> None:
    """Set or update an API key for a provider or the GitHub token."""
    if provider.lower() == "github":
        env_var = GITHUB_TOKEN_ENV_VAR
        name = "GitHub"
    else:
        llm_provider = _parse_provider(provider)
        env_var = get_api_key_env_var(llm_provider)
        name = llm_provider.value

    api_key = typer.prompt(f"Enter your {name} key", hide_input=True)

    try:
        global_config.save_credential(env_var, api_key)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Key saved for {name}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(..., help=f"Provider name ({VALID_PROVIDERS})"),
    model: str = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (optional, uses the provider's default if not provided)",
    ),
) -> None:
    """Set the active LLM provider and model."""
    llm_provider = _parse_provider(provider)

    if model and model not in AVAILABLE_MODELS[llm_provider]:
        typer.echo(f"Warning: {model} is not in the list of known models for {llm_provider.value}")

    try:
        global_config.set_provider_and_model(llm_provider, model)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Provider set to: {llm_provider.value}")
    if model:
        typer.echo(f"✓ Model set to: {model}")


@config_app.command("set-ticket-url")
def config_set_ticket_url(
    url: str = typer.Argument(..., help="Base URL for ticket links, e.g. https://example.atlassian.net/browse"),
) -> None:
    """Set the base URL used to link ticket keys."""
    try:
        global_config.set_ticket_base_url(url.rstrip("/"))
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Ticket URL set to: {url.rstrip('/')}")


@config_app.command("list-models")
def config_list_models(
    provider: str = typer.Argument(
        None,
        help="Provider name (optional, shows all if not provided)",
    )
) -> None:
    """List known models for a provider (or all providers)."""
    providers = [_parse_provider(provider)] if provider else list(LLMProvider)
    for llm_provider in providers:
        typer.echo(f"{llm_provider.value}:")
        for model in AVAILABLE_MODELS[llm_provider]:
            typer.echo(f"  • {model}")
        typer.echo()
