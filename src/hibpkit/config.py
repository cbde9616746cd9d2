"""Configuration management for hibpkit.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hibpkit.client import DEFAULT_USER_AGENT, HIBPConfig
from hibpkit.exceptions import ConfigurationError


class Settings(BaseSettings):
    """hibpkit configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="HIBP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str = Field(default="")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    base_url: str = Field(default="https://haveibeenpwned.com/api/v3")
    passwords_url: str = Field(default="https://api.pwnedpasswords.com")
    timeout: float = Field(default=30.0)

    # Pacing: explicit rpm wins over auto_rate_limit
    rpm: int | None = Field(default=None)
    auto_rate_limit: bool = Field(default=False)

    def to_client_config(
        self,
        *,
        rpm: int | None = None,
        require_api_key: bool = True,
    ) -> HIBPConfig:
        """Build a client config from these settings.

        Args:
            rpm: Override for the configured requests per minute
            require_api_key: Fail when no API key is set (Pwned Passwords
                lookups work without one)

        Raises:
            ConfigurationError: If no API key is configured
        """
        if require_api_key and not self.api_key:
            raise ConfigurationError("HIBP API key not configured. Set HIBP_API_KEY in .env")
        return HIBPConfig(
            api_key=self.api_key,
            user_agent=self.user_agent,
            base_url=self.base_url,
            passwords_url=self.passwords_url,
            timeout=self.timeout,
            rpm=rpm if rpm is not None else self.rpm,
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
