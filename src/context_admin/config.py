"""
Configuration management for Context Admin
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_MAINTAINER = "current-user"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="CONTEXT_ADMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend
    api_base_url: str = Field(default="http://localhost:3000")
    api_token: Optional[str] = Field(default=None)
    timeout: float = Field(default=10.0, gt=0)
    verify_ssl: bool = Field(default=True)

    # Recorded as maintainedBy on newly created profiles
    maintainer: str = Field(default=DEFAULT_MAINTAINER)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
