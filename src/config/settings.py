"""
Settings Management with Pydantic

Provides type-safe configuration management with:
- Environment variable and .env support
- Validation
- Configuration API connection settings
"""

from enum import Enum
from typing import Optional
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class APIConfig(BaseSettings):
    """Configuration persistence API settings."""
    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_API_",
        extra="ignore"
    )

    base_url: str = "http://localhost:8000/api"
    api_key: Optional[SecretStr] = None
    timeout: float = 30.0

    # Resource paths under base_url
    pipelines_path: str = "/pipeline-configurations"
    workflows_path: str = "/workflow-automations"

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application
    app_name: str = "Pipeline Workflow Config"
    debug: bool = False
    log_level: LogLevel = LogLevel.INFO
    log_format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    # Sub-configurations
    api: APIConfig = Field(default_factory=APIConfig)

    # Builder defaults
    default_template: str = "peak"

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(api=APIConfig())


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
