"""
Engine tunables loaded from the environment (or a .env file).

Matching thresholds, autoregulation clamps and the mesocycle length can be
tuned per deployment. Every value has a documented default.

Usage:
    from backend.settings import get_settings, Settings

    settings = get_settings()
    print(settings.autoregulation_window)

    # Override via environment
    #   AUTOREGULATION_WINDOW=5 python -m backend autoregulate ...
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_KNOWLEDGE_BASE_DIR = Path(__file__).resolve().parents[1] / "shared" / "dictionaries"


class Settings(BaseSettings):
    """Training load engine settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )
    log_level: str = Field(
        default="WARNING",
        description="Root log level used by the CLI",
    )

    # -------------------------------------------------------------------------
    # Knowledge Base
    # -------------------------------------------------------------------------
    knowledge_base_dir: Optional[str] = Field(
        default=None,
        description="Directory holding the YAML tables (defaults to shared/dictionaries)",
    )

    @property
    def knowledge_base_path(self) -> Path:
        """Resolved knowledge base directory."""
        if self.knowledge_base_dir:
            return Path(self.knowledge_base_dir)
        return DEFAULT_KNOWLEDGE_BASE_DIR

    # -------------------------------------------------------------------------
    # Exercise Name Matching
    # NOTE: thresholds pending domain-expert review; keep as-is until then.
    # -------------------------------------------------------------------------
    fuzzy_min_shared_tokens: int = Field(
        default=2,
        ge=1,
        description="Shared significant tokens needed for a fuzzy catalog match",
    )
    fuzzy_min_token_length: int = Field(
        default=3,
        ge=1,
        description="Minimum length of a token counted as significant",
    )

    # -------------------------------------------------------------------------
    # Autoregulation
    # -------------------------------------------------------------------------
    autoregulation_window: int = Field(
        default=3,
        ge=1,
        description="Number of most recent logs analyzed for recovery signals",
    )
    program_min_sets: int = Field(
        default=1,
        ge=1,
        description="Lower clamp for sets after an adjustment",
    )
    program_max_sets: int = Field(
        default=6,
        ge=1,
        description="Upper clamp for sets after an adjustment",
    )

    # -------------------------------------------------------------------------
    # Periodization / History
    # -------------------------------------------------------------------------
    mesocycle_total_weeks: int = Field(
        default=6,
        ge=2,
        description="Length of a mesocycle in weeks",
    )
    volume_history_weeks: int = Field(
        default=4,
        ge=1,
        description="Trailing weeks included in volume history",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Accept known deployment names, case-insensitively."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is one the logging module understands."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def validate_set_bounds(self) -> "Settings":
        """Set clamps must form a non-empty range."""
        if self.program_min_sets > self.program_max_sets:
            raise ValueError(
                f"program_min_sets ({self.program_min_sets}) exceeds "
                f"program_max_sets ({self.program_max_sets})"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Settings shared by the whole process.

    Loaded once; tests that change the environment call
    get_settings.cache_clear() before and after.
    """
    return Settings()
