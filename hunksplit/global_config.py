"""Global configuration management for hunksplit.

Handles user-level configuration stored in ~/.hunksplit/:
- config.yaml: Provider, model, commit author and generation settings
- credentials: API keys for LLM providers (KEY=value lines, mode 600)
"""

import os
import stat
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hunksplit.config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    DEFAULT_TEMPERATURE,
    LLMProvider,
)


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".hunksplit"

_CREDENTIALS_HEADER = "# hunksplit API credentials\n# Format: PROVIDER_API_KEY=your_key_here\n\n"


class GlobalSettings(BaseModel):
    """Validated contents of config.yaml. Unset keys stay None."""

    model_config = ConfigDict(extra="allow")

    provider: Optional[LLMProvider] = None
    model: Optional[str] = None
    max_tokens: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    author: Optional[str] = None

    @field_validator("model", "author", mode="before")
    @classmethod
    def blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


def get_global_config_dir() -> Path:
    """Get the global hunksplit configuration directory.

    Returns:
        Path to ~/.hunksplit/
    """
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Create the global config directory if needed and return it."""
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    return get_global_config_dir() / "credentials"


def load_global_config() -> Dict[str, Any]:
    """Load the raw mapping stored in config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if the file is missing.

    Raises:
        GlobalConfigError: If the file cannot be read or is not a mapping.
    """
    config_file = get_config_file_path()
    if not config_file.exists():
        return {}

    try:
        config = yaml.safe_load(config_file.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Config file {config_file} must contain a mapping")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Write a mapping to config.yaml, replacing its contents."""
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        config_file.write_text(yaml.safe_dump(config, default_flow_style=False, sort_keys=False))
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}")


def load_settings() -> GlobalSettings:
    """Load and validate config.yaml.

    Raises:
        GlobalConfigError: If the file is unreadable or holds invalid values
            (an unknown provider, a negative max_tokens, ...).
    """
    raw = load_global_config()
    try:
        return GlobalSettings.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise GlobalConfigError(f"Invalid value for '{field}' in {get_config_file_path()}: {first.get('msg')}")


def _update_config(**changes: Any) -> None:
    """Apply changes to config.yaml; a None value removes the key."""
    config = load_global_config()
    for key, value in changes.items():
        if value is None:
            config.pop(key, None)
        else:
            config[key] = value
    save_global_config(config)


def _parse_credentials(text: str) -> Dict[str, str]:
    credentials = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        credentials[key.strip()] = value.strip()
    return credentials


def load_credentials() -> Dict[str, str]:
    """Load API keys from ~/.hunksplit/credentials.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()
    if not credentials_file.exists():
        return {}

    try:
        return _parse_credentials(credentials_file.read_text())
    except OSError as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}")


def save_credential(provider_key: str, api_key: str) -> None:
    """Save or update one API key, keeping the others.

    Args:
        provider_key: Environment variable name (e.g., "OPENAI_API_KEY")
        api_key: The API key value.
    """
    credentials = load_credentials()
    credentials[provider_key] = api_key

    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()
    body = "".join(f"{key}={value}\n" for key, value in credentials.items())
    try:
        credentials_file.write_text(_CREDENTIALS_HEADER + body)
        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)
    except OSError as e:
        raise GlobalConfigError(f"Failed to save credential: {e}")


def get_credential(provider_key: str) -> Optional[str]:
    """Get an API key from the credentials file, or None."""
    return load_credentials().get(provider_key)


def get_active_provider() -> Optional[LLMProvider]:
    return load_settings().provider


def get_active_model() -> Optional[str]:
    return load_settings().model


def set_provider_and_model(provider: LLMProvider, model: str) -> None:
    """Set the active provider and model in global config."""
    _update_config(provider=provider.value, model=model)


def get_default_author() -> Optional[str]:
    """Get the default commit author override ("Name <email>").

    Returns:
        The author string, or None when commits should use git's identity.
    """
    return load_settings().author


def set_default_author(author: Optional[str]) -> None:
    """Set the default commit author, or clear it with None."""
    _update_config(author=author or None)


def initialize_default_config() -> None:
    """Write config.yaml with default values unless it already exists."""
    if get_config_file_path().exists():
        return

    save_global_config(
        {
            "provider": DEFAULT_PROVIDER.value,
            "model": DEFAULT_MODEL,
            "max_tokens": DEFAULT_MAX_TOKENS,
            "temperature": DEFAULT_TEMPERATURE,
        }
    )


def is_configured() -> bool:
    return get_config_file_path().exists()
