"""Base classes and shared utilities for LLM providers."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

from hunksplit.global_config import GlobalConfigError, get_credential
from hunksplit.llm.exceptions import MissingAPIKeyError

LOG = logging.getLogger(__name__)


@dataclass
class RawLLMResult:
    """Unparsed result of a classifier call, including token usage."""

    raw_response: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def classify(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Send a grouping request and return the raw response.

        Args:
            system_prompt: The system prompt to use.
            user_prompt: The user prompt to use.

        Returns:
            A RawLLMResult containing the raw response and token usage.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors.
        """
        pass

    @abstractmethod
    def get_api_key(self) -> str:
        """Get the API key from environment or credentials file.

        Checks in order:
        1. Environment variable
        2. ~/.hunksplit/credentials file
        3. Repo-level .env file (loaded into the environment at import)

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        pass

    def _get_api_key_with_fallback(self, env_var_name: str, provider_name: str) -> str:
        """Helper to get API key with fallback to credentials file.

        Args:
            env_var_name: Environment variable name to check.
            provider_name: Human-readable provider name for error messages.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        api_key = os.getenv(env_var_name)
        if api_key:
            return api_key

        try:
            api_key = get_credential(env_var_name)
        except GlobalConfigError as e:
            LOG.warning("Could not read credentials file: %s", e)
            api_key = None
        if api_key:
            return api_key

        raise MissingAPIKeyError(
            f"{provider_name} API key not found. Set it using:\n"
            f"  1. Environment variable: export {env_var_name}=your_key_here\n"
            f"  2. Run: hunksplit config set-key {provider_name.lower()}\n"
            f"  3. Manually add to ~/.hunksplit/credentials"
        )
