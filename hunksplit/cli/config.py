"""CLI commands for global configuration management."""

from typing import Optional

import typer

from hunksplit import global_config
from hunksplit.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    LLMProvider,
)

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage global hunksplit configuration in ~/.hunksplit/",
    add_completion=False,
)

_VALID_PROVIDERS = ", ".join(p.value for p in LLMProvider)


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.lower())
    except ValueError:
        typer.echo(f"Invalid provider: {provider}", err=True)
        typer.echo(f"Valid providers: {_VALID_PROVIDERS}")
        raise typer.Exit(1)


def _mask(api_key: str) -> str:
    return api_key[:8] + "..." + api_key[-4:] if len(api_key) > 12 else "***"


def _echo_models(provider: LLMProvider, numbered: bool = False) -> None:
    for i, model in enumerate(AVAILABLE_MODELS[provider], 1):
        typer.echo(f"  {i}. {model}" if numbered else f"  • {model}")


def _config_error(e: global_config.GlobalConfigError) -> None:
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current global configuration."""
    if not global_config.is_configured():
        typer.echo("No configuration found. Run 'hunksplit config set-provider <provider>' to set up.")
        return

    try:
        settings = global_config.load_settings()
        credentials = global_config.load_credentials()
    except global_config.GlobalConfigError as e:
        _config_error(e)

    provider = settings.provider
    max_tokens = settings.max_tokens if settings.max_tokens is not None else DEFAULT_MAX_TOKENS
    temperature = settings.temperature if settings.temperature is not None else DEFAULT_TEMPERATURE

    typer.echo(f"Current hunksplit configuration ({global_config.get_config_file_path()}):")
    typer.echo()
    typer.echo(f"  Provider: {provider.value if provider else 'not set'}")
    typer.echo(f"  Model: {settings.model or 'not set'}")
    typer.echo(f"  Max Tokens: {max_tokens}")
    typer.echo(f"  Temperature: {temperature}")
    typer.echo(f"  Author: {settings.author or 'git default'}")

    if provider:
        env_var = API_KEY_ENV_VARS[provider]
        api_key = credentials.get(env_var)
        typer.echo(f"  API Key ({env_var}): {_mask(api_key) if api_key else 'not set'}")


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(..., help=f"Provider name ({_VALID_PROVIDERS})"),
) -> None:
    """Store an API key in ~/.hunksplit/credentials."""
    llm_provider = _parse_provider(provider)

    api_key = typer.prompt(f"Enter your {llm_provider.value} API key", hide_input=True)

    try:
        global_config.save_credential(API_KEY_ENV_VARS[llm_provider], api_key.strip())
    except global_config.GlobalConfigError as e:
        _config_error(e)

    typer.echo(f"✓ API key saved for {llm_provider.value}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(..., help=f"Provider name ({_VALID_PROVIDERS})"),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (prompts with the known models when omitted)",
    ),
) -> None:
    """Set the active LLM provider and model."""
    llm_provider = _parse_provider(provider)
    models = AVAILABLE_MODELS[llm_provider]

    if model is None:
        typer.echo(f"Available models for {llm_provider.value}:")
        _echo_models(llm_provider, numbered=True)
        choice = typer.prompt(f"Select a model (1-{len(models)})", type=int, default=1)
        if not 1 <= choice <= len(models):
            typer.echo("Invalid choice. Aborting.", err=True)
            raise typer.Exit(1)
        model = models[choice - 1]
    elif model not in models:
        typer.echo(f"Warning: {model} is not a known {llm_provider.value} model")
        if not typer.confirm("Continue anyway?", default=False):
            raise typer.Exit(0)

    try:
        global_config.initialize_default_config()
        global_config.set_provider_and_model(llm_provider, model)
    except global_config.GlobalConfigError as e:
        _config_error(e)

    typer.echo(f"✓ Provider set to: {llm_provider.value}")
    typer.echo(f"✓ Model set to: {model}")


@config_app.command("set-author")
def config_set_author(
    author: Optional[str] = typer.Argument(
        None,
        help='Commit author as "Name <email>"; omit to use git\'s identity',
    ),
) -> None:
    """Set or clear the author used for every split commit."""
    if author and ("<" not in author or not author.rstrip().endswith(">")):
        typer.echo('Author must look like "Name <email>"', err=True)
        raise typer.Exit(1)

    try:
        global_config.set_default_author(author)
    except global_config.GlobalConfigError as e:
        _config_error(e)

    typer.echo(f"✓ Default author set to: {author}" if author else "✓ Default author cleared")


@config_app.command("list-providers")
def config_list_providers() -> None:
    """List the supported LLM providers."""
    typer.echo("Available LLM providers:")
    for llm_provider in LLMProvider:
        typer.echo(f"  • {llm_provider.value}  ({API_KEY_ENV_VARS[llm_provider]})")
    typer.echo()
    typer.echo("Use 'hunksplit config list-models <provider>' to see available models.")


@config_app.command("list-models")
def config_list_models(
    provider: Optional[str] = typer.Argument(
        None,
        help="Provider name (all providers when omitted)",
    ),
) -> None:
    """List known models for one provider or all of them."""
    providers = [_parse_provider(provider)] if provider else list(LLMProvider)
    for llm_provider in providers:
        typer.echo(f"{llm_provider.value}:")
        _echo_models(llm_provider)
        typer.echo()
