"""
Configuration Management

Process-level settings using Pydantic Settings.
All settings loaded from SDK_* environment variables (or .env) with sensible defaults.
Account data itself lives in the account config file, see config_store.py.
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SDK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ============================================================
    # Account Configuration
    # ============================================================
    config_file: Optional[str] = Field(
        None,
        description="Path to account config (.properties or .yaml). Resolved via paths.py when unset"
    )
    default_account_key: str = Field(
        "DefaultAccount",
        description="Unprefixed key naming the default account when several are declared"
    )
    account_cache_enabled: bool = Field(
        True,
        description="Cache indexed accounts per config snapshot"
    )

    # ============================================================
    # Logging Configuration
    # ============================================================
    log_level: str = Field("INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        "%(levelname)s: %(message)s",
        description="Log format string"
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
