"""Configuration settings for the walk-in queue service."""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = Field(default="Walk-in Queue")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # Database
    database_url: str = Field(default="sqlite:///./walkin_queue.db")

    # Security
    secret_key: str = Field(default="change-me-in-production")
    jwt_secret_key: str = Field(default="change-me-jwt-secret")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=720)

    # Office calendar. Queue numbers, "today" filters and the stale-serving
    # cutoff are all computed in this timezone.
    office_timezone: str = Field(default="Asia/Manila")
    # Staff tokens stop being accepted at this office-local hour (0-23).
    # Set to 24 to disable the automatic end-of-day logout.
    staff_logout_hour: int = Field(default=18, ge=0, le=24)

    # Daily counter retry budget
    counter_retry_attempts: int = Field(default=5, ge=1)
    counter_retry_backoff_ms: int = Field(default=20, ge=0)

    # Rate limits
    join_rate_limit: str = Field(default="30/minute")
    login_rate_limit: str = Field(default="10/minute")

    # CORS
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ]
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Create global settings instance
settings = Settings()
