"""
Configuration settings for StoryFoundry
"""
from typing import List, Optional, Union
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Project Info
    PROJECT_NAME: str = "StoryFoundry API"
    VERSION: str = "1.0.0"
    APP_ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # API Settings
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    CORS_ORIGINS: Union[str, List[str]] = Field(
        default="http://localhost:3000,http://localhost"
    )

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        elif isinstance(v, list):
            return v
        return ["http://localhost:3000", "http://localhost"]

    ALLOWED_HOSTS: Union[str, List[str]] = Field(
        default="localhost,127.0.0.1,testserver"
    )

    @field_validator('ALLOWED_HOSTS', mode='before')
    @classmethod
    def parse_allowed_hosts(cls, v):
        """Parse allowed hosts from string or list"""
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        elif isinstance(v, list):
            return v
        return ["localhost", "127.0.0.1"]

    # Supabase (names shared with the web frontend are accepted as well)
    SUPABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    SUPABASE_ANON_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    )
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(default=None)
    SUPABASE_TIMEOUT: float = Field(default=10.0)
    SUPABASE_AUTH_COOKIE: Optional[str] = Field(default=None)

    # Session
    SIGN_OUT_REDIRECT: str = Field(default="/")

    # Event bus
    EVENT_BUS_BACKEND: str = Field(default="memory")  # "memory" or "redis"
    EVENT_BUS_STREAM_PREFIX: str = Field(default="storyfoundry:events")
    EVENT_BUS_POLL_TIMEOUT_MS: int = Field(default=1000)
    EVENT_BUS_STREAM_MAXLEN: int = Field(default=1000)  # approximate cap per event stream
    REDIS_URL: Optional[str] = Field(default=None)

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 60

    # Observability
    OBSERVABILITY_ENABLED: bool = Field(default=True)
    METRICS_ENABLED: bool = Field(default=True)
    METRICS_PATH: str = Field(default="/metrics")
    STRUCTURED_LOGGING_ENABLED: bool = Field(default=False)
    TRACING_ENABLED: bool = Field(default=False)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def auth_cookie_name(self) -> Optional[str]:
        """Cookie holding the Supabase session, e.g. ``sb-abcdefgh-auth-token``."""
        if self.SUPABASE_AUTH_COOKIE:
            return self.SUPABASE_AUTH_COOKIE
        if not self.SUPABASE_URL:
            return None
        hostname = urlparse(self.SUPABASE_URL).hostname or ""
        project_ref = hostname.split(".")[0]
        if not project_ref:
            return None
        return f"sb-{project_ref}-auth-token"


# Create settings instance
settings = Settings()
