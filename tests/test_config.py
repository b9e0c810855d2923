"""Tests for hunksplit.config and hunksplit.global_config modules."""

import stat
from pathlib import Path

import pytest
import yaml

import hunksplit.config as config_module
from hunksplit.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    LLMProvider,
    get_api_key_env_var,
    load_config,
)
from hunksplit.global_config import (
    GlobalConfigError,
    ensure_global_config_dir,
    get_active_model,
    get_active_provider,
    get_config_file_path,
    get_credential,
    get_credentials_file_path,
    get_default_author,
    get_global_config_dir,
    initialize_default_config,
    is_configured,
    load_credentials,
    load_global_config,
    load_settings,
    save_credential,
    save_global_config,
    set_default_author,
    set_provider_and_model,
)


@pytest.fixture
def config_dir(temp_dir, mocker):
    """Point the global config directory at a temporary location."""
    mock_dir = temp_dir / ".hunksplit"
    mocker.patch("hunksplit.global_config._CONFIG_DIR", mock_dir)
    return mock_dir


class TestProviderTables:
    """Tests for the static provider tables."""

    def test_every_provider_has_models_and_key(self):
        for provider in LLMProvider:
            assert AVAILABLE_MODELS[provider]
            assert API_KEY_ENV_VARS[provider].endswith("_API_KEY")
            assert get_api_key_env_var(provider) == API_KEY_ENV_VARS[provider]

    def test_default_model_belongs_to_default_provider(self):
        assert DEFAULT_MODEL in AVAILABLE_MODELS[DEFAULT_PROVIDER]
        assert DEFAULT_MAX_TOKENS > 0


class TestGlobalConfigPaths:
    """Tests for global config directory functions."""

    def test_default_dir(self):
        assert isinstance(get_global_config_dir(), Path)
        assert ".hunksplit" in str(get_global_config_dir())

    def test_ensure_creates_directory(self, config_dir):
        assert ensure_global_config_dir() == config_dir
        assert config_dir.is_dir()

    def test_file_paths(self, config_dir):
        assert get_config_file_path() == config_dir / "config.yaml"
        assert get_credentials_file_path() == config_dir / "credentials"


class TestLoadSaveGlobalConfig:
    """Tests for loading and saving config.yaml."""

    def test_missing_file_is_empty(self, config_dir):
        assert load_global_config() == {}
        assert not is_configured()

    def test_round_trip(self, config_dir):
        save_global_config({"provider": "groq", "temperature": 0.1})

        assert load_global_config() == {"provider": "groq", "temperature": 0.1}
        assert is_configured()

    def test_invalid_yaml_raises(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("provider: [unclosed\n")

        with pytest.raises(GlobalConfigError):
            load_global_config()

    def test_non_mapping_raises(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("- just\n- a list\n")

        with pytest.raises(GlobalConfigError):
            load_global_config()

    def test_initialize_default_config(self, config_dir):
        initialize_default_config()

        data = yaml.safe_load((config_dir / "config.yaml").read_text())
        assert data["provider"] == DEFAULT_PROVIDER.value
        assert data["model"] == DEFAULT_MODEL

    def test_initialize_keeps_existing(self, config_dir):
        save_global_config({"provider": "anthropic"})

        initialize_default_config()

        assert load_global_config() == {"provider": "anthropic"}


class TestSettings:
    """Tests for individual settings."""

    def test_provider_and_model(self, config_dir):
        set_provider_and_model(LLMProvider.ANTHROPIC, "claude-3-5-haiku-latest")

        assert get_active_provider() == LLMProvider.ANTHROPIC
        assert get_active_model() == "claude-3-5-haiku-latest"

    def test_unknown_provider_is_rejected(self, config_dir):
        save_global_config({"provider": "mystery"})

        with pytest.raises(GlobalConfigError) as exc_info:
            get_active_provider()

        assert "provider" in str(exc_info.value)

    def test_settings_are_validated(self, config_dir):
        save_global_config({"max_tokens": -5})

        with pytest.raises(GlobalConfigError):
            load_settings()

    def test_settings_defaults_and_extra_keys(self, config_dir):
        save_global_config({"model": "  ", "custom": 1})

        settings = load_settings()

        assert settings.model is None
        assert settings.provider is None
        assert settings.max_tokens is None

    def test_default_author(self, config_dir):
        assert get_default_author() is None

        set_default_author("Jane Doe <jane@example.com>")
        assert get_default_author() == "Jane Doe <jane@example.com>"

        set_default_author(None)
        assert get_default_author() is None
        assert "author" not in load_global_config()


class TestCredentials:
    """Tests for the credentials file."""

    def test_save_and_get(self, config_dir):
        save_credential("OPENAI_API_KEY", "sk-one")
        save_credential("GROQ_API_KEY", "gsk-two")
        save_credential("OPENAI_API_KEY", "sk-three")

        assert load_credentials() == {"OPENAI_API_KEY": "sk-three", "GROQ_API_KEY": "gsk-two"}
        assert get_credential("GROQ_API_KEY") == "gsk-two"
        assert get_credential("GOOGLE_API_KEY") is None

    def test_file_is_private(self, config_dir):
        save_credential("OPENAI_API_KEY", "sk-one")

        mode = stat.S_IMODE((config_dir / "credentials").stat().st_mode)
        assert mode == stat.S_IRUSR | stat.S_IWUSR

    def test_comments_and_blank_lines_are_ignored(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "credentials").write_text("# comment\n\nANTHROPIC_API_KEY = sk-ant\nnot a pair\n")

        assert load_credentials() == {"ANTHROPIC_API_KEY": "sk-ant"}


class TestLoadConfig:
    """Tests for load_config, which updates the active settings."""

    @pytest.fixture(autouse=True)
    def restore_active(self, mocker):
        mocker.patch.object(config_module, "ACTIVE_PROVIDER", config_module.ACTIVE_PROVIDER)
        mocker.patch.object(config_module, "ACTIVE_MODEL", config_module.ACTIVE_MODEL)
        mocker.patch.object(config_module, "MAX_TOKENS", config_module.MAX_TOKENS)
        mocker.patch.object(config_module, "TEMPERATURE", config_module.TEMPERATURE)

    def test_applies_global_config(self, config_dir):
        save_global_config(
            {"provider": "google", "model": "gemini-2.5-pro", "max_tokens": 2048, "temperature": 0.0}
        )

        load_config()

        assert config_module.ACTIVE_PROVIDER == LLMProvider.GOOGLE
        assert config_module.ACTIVE_MODEL == "gemini-2.5-pro"
        assert config_module.MAX_TOKENS == 2048
        assert config_module.TEMPERATURE == 0.0

    def test_provider_without_model_uses_provider_default(self, config_dir):
        save_global_config({"provider": "groq"})

        load_config()

        assert config_module.ACTIVE_MODEL == AVAILABLE_MODELS[LLMProvider.GROQ][0]

    def test_broken_config_keeps_defaults(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text(": : :\n  - [\n")
        before = config_module.ACTIVE_PROVIDER

        load_config()

        assert config_module.ACTIVE_PROVIDER == before
