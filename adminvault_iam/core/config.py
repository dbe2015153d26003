"""
IAM Client Configuration
Environment variables and client settings management
"""

from dataclasses import dataclass
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from adminvault_iam.core.exceptions import ConfigurationError

DEFAULT_TIMEOUT_MS = 10000
DEFAULT_CACHE_TTL_MS = 300000

Environment = Literal["development", "staging", "production"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """IAM client settings with environment variable support"""

    # Application
    ENVIRONMENT: Environment = Field(default="development", description="Embedding application environment")
    LOG_LEVEL: LogLevel = Field(default="INFO", description="Level for adminvault_iam loggers")

    # Administration service
    ADMINVAULT_BASE_URL: Optional[str] = Field(default=None, description="Administration API base URL")
    ADMINVAULT_API_KEY: Optional[str] = Field(default=None, description="API key sent as Bearer token")
    ADMINVAULT_TIMEOUT_MS: int = Field(default=DEFAULT_TIMEOUT_MS, description="Request timeout in milliseconds")

    # Permission cache
    PERMISSION_CACHE_TTL_MS: int = Field(default=DEFAULT_CACHE_TTL_MS, description="Permission cache TTL in milliseconds")

    @field_validator("ENVIRONMENT", "LOG_LEVEL", mode="before")
    @classmethod
    def normalize_choice(cls, v, info):
        # Case-insensitive; membership is checked by the Literal type
        if not isinstance(v, str):
            return v
        v = v.strip()
        return v.upper() if info.field_name == "LOG_LEVEL" else v.lower()

    @field_validator("ADMINVAULT_TIMEOUT_MS", "PERMISSION_CACHE_TTL_MS")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Durations must be non-negative milliseconds")
        return v

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for a single AdminVaultClient"""
    base_url: str
    api_key: str
    timeout: int = DEFAULT_TIMEOUT_MS  # milliseconds

    def __post_init__(self):
        if not self.base_url:
            raise ConfigurationError("base_url is required")
        if not self.api_key:
            raise ConfigurationError("api_key is required")
        if self.timeout is None or self.timeout <= 0:
            raise ConfigurationError("timeout must be a positive number of milliseconds")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientConfig":
        return cls(
            base_url=settings.ADMINVAULT_BASE_URL or "",
            api_key=settings.ADMINVAULT_API_KEY or "",
            timeout=settings.ADMINVAULT_TIMEOUT_MS or DEFAULT_TIMEOUT_MS,
        )


def get_settings() -> Settings:
    """Load settings from the environment and ``.env``"""
    return Settings()
