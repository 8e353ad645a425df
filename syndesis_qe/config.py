"""
Suite Configuration Management

Loads configuration from environment variables and an optional .env file.
Account credentials live in a separate JSON file (see models.accounts); this
module only knows where to find it.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from syndesis_qe.utils.exceptions import ConfigurationException


class Settings(BaseSettings):
    """Suite settings with validation"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO")

    # Syndesis management API
    syndesis_url: Optional[str] = Field(
        default=None, description="Base URL of the Syndesis installation"
    )
    syndesis_token: Optional[str] = Field(
        default=None, description="OpenShift access token used for the REST API"
    )
    syndesis_user: str = Field(default="pista", description="Forwarded user name")

    # Test resources
    account_config_path: str = Field(
        default="./credentials.json", description="Path to the accounts JSON file"
    )
    mapping_path: Optional[str] = Field(
        default=None, description="Overrides the packaged twitter-salesforce mapping"
    )

    # HTTP
    http_timeout: float = Field(default=30.0)

    # Third-party APIs
    salesforce_api_version: str = Field(default="v41.0")
    twitter_api_url: str = Field(default="https://api.twitter.com")
    github_api_url: str = Field(default="https://api.github.com")

    # Polling (seconds)
    activation_timeout: float = Field(default=600, description="Wait for integration activation")
    activation_poll_interval: float = Field(default=10)
    contact_timeout: float = Field(default=120, description="Wait for the contact to appear")
    contact_poll_interval: float = Field(default=5)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment"""
        valid_envs = ["development", "staging", "production", "test"]
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Environment must be one of {valid_envs}")
        return v_lower

    @field_validator(
        "activation_timeout",
        "activation_poll_interval",
        "contact_timeout",
        "contact_poll_interval",
    )
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Polling durations must be non-negative")
        return v

    @property
    def syndesis_api_url(self) -> str:
        """Get management REST API base URL"""
        return f"{(self.syndesis_url or '').rstrip('/')}/api/v1"

    def validate_required(self) -> None:
        """
        Validate that values needed for a live run are present.

        Raises:
            ConfigurationException: If any required value is missing
        """
        missing = []

        if not self.syndesis_url:
            missing.append("syndesis_url")
        if not self.syndesis_token:
            missing.append("syndesis_token")

        if missing:
            raise ConfigurationException(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Set the matching environment variables or add them to .env.",
                details={"missing": missing},
            )


@lru_cache()
def get_settings() -> Settings:
    """Get suite settings (cached)."""
    return Settings()
