"""
Unit tests for backend/settings.py
"""

import pytest
from pydantic import ValidationError

from backend.settings import DEFAULT_KNOWLEDGE_BASE_DIR, Settings, get_settings


# Environment variables a developer shell might set
ENGINE_ENV_VARS = [
    "ENVIRONMENT",
    "LOG_LEVEL",
    "KNOWLEDGE_BASE_DIR",
    "AUTOREGULATION_WINDOW",
    "PROGRAM_MIN_SETS",
    "PROGRAM_MAX_SETS",
    "MESOCYCLE_TOTAL_WEEKS",
    "VOLUME_HISTORY_WEEKS",
    "FUZZY_MIN_SHARED_TOKENS",
    "FUZZY_MIN_TOKEN_LENGTH",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear engine environment variables to test true defaults."""
    for var in ENGINE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        """Default environment should be development."""
        settings = Settings(_env_file=None)
        assert settings.environment == "development"

    def test_log_level_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.log_level == "WARNING"

    def test_knowledge_base_defaults_to_shared_dictionaries(self, clean_env):
        """Without an override the bundled YAML tables are used."""
        settings = Settings(_env_file=None)
        assert settings.knowledge_base_dir is None
        assert settings.knowledge_base_path == DEFAULT_KNOWLEDGE_BASE_DIR
        assert (settings.knowledge_base_path / "muscle_groups.yaml").exists()

    def test_engine_tunables_defaults(self, clean_env):
        """Engine constants default to their documented values."""
        settings = Settings(_env_file=None)
        assert settings.autoregulation_window == 3
        assert settings.program_min_sets == 1
        assert settings.program_max_sets == 6
        assert settings.mesocycle_total_weeks == 6
        assert settings.volume_history_weeks == 4
        assert settings.fuzzy_min_shared_tokens == 2
        assert settings.fuzzy_min_token_length == 3


@pytest.mark.unit
class TestSettingsValidation:
    """Test Settings validation behavior."""

    def test_valid_environments_accepted(self):
        """Valid environment values should be accepted."""
        for env in ["development", "staging", "production", "test"]:
            settings = Settings(_env_file=None, environment=env)
            assert settings.environment == env

    def test_environment_case_insensitive(self):
        """Environment validation should be case-insensitive."""
        settings = Settings(_env_file=None, environment="PRODUCTION")
        assert settings.environment == "production"

    def test_invalid_environment_raises_error(self):
        """Invalid environment should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, environment="invalid")
        assert "Invalid environment" in str(exc_info.value)

    def test_log_level_normalized(self):
        settings = Settings(_env_file=None, log_level="debug")
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level_raises_error(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, log_level="chatty")
        assert "Invalid log level" in str(exc_info.value)

    def test_window_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, autoregulation_window=0)

    def test_set_bounds_must_be_ordered(self):
        """program_min_sets may not exceed program_max_sets."""
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, program_min_sets=5, program_max_sets=3)
        assert "program_min_sets" in str(exc_info.value)

    def test_knowledge_base_dir_override(self, tmp_path):
        settings = Settings(_env_file=None, knowledge_base_dir=str(tmp_path))
        assert settings.knowledge_base_path == tmp_path


@pytest.mark.unit
class TestSettingsFromEnvironment:
    """Test that environment variables override defaults."""

    def test_env_overrides_window(self, clean_env, monkeypatch):
        monkeypatch.setenv("AUTOREGULATION_WINDOW", "5")
        settings = Settings(_env_file=None)
        assert settings.autoregulation_window == 5

    def test_env_is_case_insensitive(self, clean_env, monkeypatch):
        monkeypatch.setenv("mesocycle_total_weeks", "8")
        settings = Settings(_env_file=None)
        assert settings.mesocycle_total_weeks == 8


@pytest.mark.unit
class TestGetSettings:
    """Test the cached accessor."""

    def test_get_settings_is_cached(self, clean_settings):
        """get_settings should return the same instance."""
        assert get_settings() is get_settings()

    def test_cache_clear_picks_up_env(self, clean_env, clean_settings, monkeypatch):
        """Clearing the cache re-reads the environment."""
        monkeypatch.setenv("VOLUME_HISTORY_WEEKS", "2")
        get_settings.cache_clear()
        assert get_settings().volume_history_weeks == 2
