"""Configuration management for trip-split."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import DEFAULT_DESTINATION_CURRENCY, DEFAULT_HOME_CURRENCY


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI API (translation only; settlement works without it)
    openai_api_key: str | None = None

    # Translation settings
    translation_model: str = "gpt-4o-mini"
    default_target_language: str = "Traditional Chinese"

    # Currency defaults for new trips
    home_currency: str = DEFAULT_HOME_CURRENCY
    destination_currency: str = DEFAULT_DESTINATION_CURRENCY


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check your .env file and environment "
            f"variables. See .env.example for reference.\n"
            f"Error: {e}"
        ) from e
