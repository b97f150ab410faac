"""Configuration management for SplitLedger."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPLIT_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Currency balances are reported in when a ledger doesn't name one
    home_currency: str = "USD"

    log_level: str = "INFO"

    @field_validator("home_currency", "log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()


def load_settings(**overrides) -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings(**overrides)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check your SPLIT_LEDGER_* environment "
            f"variables and .env file.\n"
            f"Error: {e}"
        ) from e
