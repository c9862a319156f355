"""
Configuration for the tutor chat proxy.

Uses pydantic-settings to load from environment variables.
Supports dependency injection for testing flexibility.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class TutorSettings(BaseSettings):
    """Tutor configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider credential (DEEPSEEK_API_KEY)
    deepseek_api_key: str | None = None
    deepseek_api_base: str = "https://api.deepseek.com/v1"

    # Completion parameters
    model: str = "deepseek-chat"
    request_timeout: float = 45.0  # seconds
    max_tokens: int = 1200
    temperature: float = 0.7
    frequency_penalty: float = 0.3
    presence_penalty: float = 0.3
    user_agent: str = "English-Learning-App/1.0"

    # Logging
    service_name: str = "lingua-bridge-tutor"
    service_environment: str = "development"

    @property
    def has_api_key(self) -> bool:
        return bool(self.deepseek_api_key and self.deepseek_api_key.strip())


# Global settings instance
_settings: TutorSettings | None = None


def get_settings() -> TutorSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = TutorSettings()
    return _settings


def configure(**kwargs: str | float | int | None) -> None:
    """
    Configure tutor settings programmatically.

    Args:
        **kwargs: Settings to override

    Example:
        >>> configure(request_timeout=30.0, temperature=0.5)
    """
    global _settings
    current = get_settings().model_dump()
    current.update({k: v for k, v in kwargs.items() if v is not None})
    _settings = TutorSettings(**current)


def reset_settings() -> None:
    """
    Reset the global settings instance.

    The next call to get_settings() will read the environment again.
    """
    global _settings
    _settings = None


def set_settings(settings: TutorSettings) -> None:
    """
    Set a custom settings instance.

    Args:
        settings: Custom TutorSettings instance to use

    Example:
        >>> set_settings(TutorSettings(deepseek_api_key="sk-test"))
        >>> get_settings().has_api_key
        True
    """
    global _settings
    _settings = settings
