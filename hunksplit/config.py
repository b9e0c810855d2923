"""Configuration for hunksplit LLM providers.

The module-level ACTIVE_* values start at the defaults below and are
replaced by load_config() with what ~/.hunksplit/config.yaml says. Providers
read them through the module (``import hunksplit.config as _config``) so a
reload is seen everywhere. Use 'hunksplit config' commands to change them.
"""

from enum import Enum


class LLMProvider(Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROQ = "groq"


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
        "gemini-2.5-flash",
        "gemini-2.5-pro",
        "gemini-2.0-flash-lite",
    ],
    LLMProvider.GROQ: [
        "llama-3.3-70b-versatile",
        "llama-3.1-8b-instant",
    ],
}

API_KEY_ENV_VARS = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.GOOGLE: "GOOGLE_API_KEY",
    LLMProvider.GROQ: "GROQ_API_KEY",
}

DEFAULT_PROVIDER = LLMProvider.OPENAI
DEFAULT_MODEL = AVAILABLE_MODELS[DEFAULT_PROVIDER][0]
# A grouping plan lists every hunk reference, so it needs more room than a
# single commit message
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.3

ACTIVE_PROVIDER = DEFAULT_PROVIDER
ACTIVE_MODEL = DEFAULT_MODEL
MAX_TOKENS = DEFAULT_MAX_TOKENS
TEMPERATURE = DEFAULT_TEMPERATURE


def load_config() -> None:
    """Apply ~/.hunksplit/config.yaml to the ACTIVE_* values.

    Called by the CLI before the first LLM request. An unreadable or
    invalid file leaves the current values untouched.
    """
    global ACTIVE_PROVIDER, ACTIVE_MODEL, MAX_TOKENS, TEMPERATURE

    # Imported here: global_config imports this module
    from hunksplit import global_config

    try:
        settings = global_config.load_settings()
    except global_config.GlobalConfigError:
        return

    if settings.provider:
        ACTIVE_PROVIDER = settings.provider
        # Never pair a new provider with the previous provider's model
        ACTIVE_MODEL = AVAILABLE_MODELS[settings.provider][0]
    if settings.model:
        ACTIVE_MODEL = settings.model
    if settings.max_tokens is not None:
        MAX_TOKENS = settings.max_tokens
    if settings.temperature is not None:
        TEMPERATURE = settings.temperature


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name holding a provider's API key."""
    return API_KEY_ENV_VARS[provider]
