"""LLM classifier module for hunksplit.

This module provides a unified interface to multiple LLM providers for
grouping hunks into commits. The active provider is configured in
~/.hunksplit/config.yaml (see hunksplit/config.py).
"""

import logging

from dotenv import load_dotenv

import hunksplit.config as _config
from hunksplit.compose.models import FileHunks
from hunksplit.compose.prompt import (
    CLASSIFY_SYSTEM_PROMPT,
    build_classify_prompt,
    format_hunks_for_llm,
    get_stats,
)
from hunksplit.config import LLMProvider
from hunksplit.llm.base import BaseLLMProvider, RawLLMResult
from hunksplit.llm.exceptions import JSONParseError, LLMError, MissingAPIKeyError
from hunksplit.llm.parsing import parse_json_response

LOG = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def get_provider(
    provider: LLMProvider | None = None,
    model: str | None = None,
) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        provider: The provider to use. Defaults to ACTIVE_PROVIDER from config.
        model: The model to use. Defaults to ACTIVE_MODEL from config when
            the provider is the active one, else the provider's default.

    Returns:
        An instance of the appropriate LLM provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    if model is None and (provider is None or provider == _config.ACTIVE_PROVIDER):
        model = _config.ACTIVE_MODEL
    provider = provider or _config.ACTIVE_PROVIDER

    if provider == LLMProvider.OPENAI:
        from hunksplit.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(model=model)

    elif provider == LLMProvider.ANTHROPIC:
        from hunksplit.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=model)

    elif provider == LLMProvider.GOOGLE:
        from hunksplit.llm.google_provider import GoogleProvider

        return GoogleProvider(model=model)

    elif provider == LLMProvider.GROQ:
        from hunksplit.llm.groq_provider import GroqProvider

        return GroqProvider(model=model)

    else:
        raise ValueError(f"Unsupported provider: {provider}")


def classify_hunks(
    files: list[FileHunks],
    branch: str = "unknown",
    recent_commits: list[str] | None = None,
    provider: BaseLLMProvider | None = None,
) -> tuple[dict, RawLLMResult]:
    """Ask the classifier to group hunks into commits.

    Args:
        files: Parsed files with hunks.
        branch: Current branch name, for context.
        recent_commits: Recent commit subjects, for style context.
        provider: Provider to use. Defaults to get_provider().

    Returns:
        Tuple of (parsed JSON response, raw result with token usage).

    Raises:
        MissingAPIKeyError: If the API key is not set.
        JSONParseError: If the response cannot be parsed.
        LLMError: For other LLM-related errors.
    """
    provider = provider or get_provider()
    user_prompt = build_classify_prompt(files, branch, recent_commits or [])

    LOG.info("Requesting grouping from %s (%d chars)", getattr(provider, "model", "?"), len(user_prompt))
    result = provider.classify(CLASSIFY_SYSTEM_PROMPT, user_prompt)
    LOG.debug("Classifier used %d input / %d output tokens", result.input_tokens, result.output_tokens)

    return parse_json_response(result.raw_response), result


# Export commonly used items
__all__ = [
    "BaseLLMProvider",
    "LLMError",
    "MissingAPIKeyError",
    "JSONParseError",
    "RawLLMResult",
    "CLASSIFY_SYSTEM_PROMPT",
    "build_classify_prompt",
    "format_hunks_for_llm",
    "get_stats",
    "parse_json_response",
    "get_provider",
    "classify_hunks",
]
