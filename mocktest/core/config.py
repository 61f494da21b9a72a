"""Application settings and configuration."""

from typing import Literal

from pydantic import Field, model_validator  # type: ignore
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore

DEFAULT_DATABASE_URL = "sqlite:///./mocktest.db"
DEFAULT_JWT_SECRET = "change_me_super_secret"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ENV: Literal["dev", "staging", "prod", "test"] = Field(default="dev")
    PROJECT_NAME: str = Field(default="Mock Test Platform API")

    # API
    API_PREFIX: str = Field(default="/v1")

    # Database
    DATABASE_URL: str = Field(default=DEFAULT_DATABASE_URL)

    # Redis
    REDIS_URL: str | None = Field(default=None)
    REDIS_ENABLED: bool = Field(default=True)
    REDIS_REQUIRED: bool = Field(default=False)  # True in prod, False in dev

    # CORS - Accept string or list, will be normalized to list
    CORS_ORIGINS: str | list[str] = Field(default="http://localhost:3000")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Security - JWT (tokens are issued by the auth provider, verified here)
    JWT_SECRET: str = Field(default=DEFAULT_JWT_SECRET)
    JWT_ALG: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=15)

    # Test engine
    TIMING_BUFFER_MINUTES: int = Field(default=5, ge=0)
    LEADERBOARD_SIZE: int = Field(default=10, ge=1)

    # Rate Limiting
    RL_SUBMIT_USER_LIMIT: int = Field(default=10)
    RL_SUBMIT_USER_WINDOW: int = Field(default=900)  # 15 minutes

    @model_validator(mode="before")
    @classmethod
    def parse_cors_origins(cls, data):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(data, dict) and "CORS_ORIGINS" in data:
            cors_origins = data["CORS_ORIGINS"]
            if isinstance(cors_origins, str):
                data["CORS_ORIGINS"] = [
                    origin.strip() for origin in cors_origins.split(",") if origin.strip()
                ]
        return data

    @model_validator(mode="after")
    def check_production_settings(self):
        """Normalize CORS origins and fail fast on unsafe production settings."""
        if isinstance(self.CORS_ORIGINS, str):
            object.__setattr__(
                self,
                "CORS_ORIGINS",
                [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()],
            )
        if self.ENV == "prod":
            if self.DATABASE_URL == DEFAULT_DATABASE_URL:
                raise ValueError("DATABASE_URL must be set in production")
            if self.JWT_SECRET == DEFAULT_JWT_SECRET:
                raise ValueError("JWT_SECRET must be set in production")
            # In prod, Redis backs rate limiting across instances
            if self.REDIS_ENABLED and not self.REDIS_URL:
                raise ValueError("REDIS_URL must be set in production when REDIS_ENABLED=true")
            if self.REDIS_ENABLED:
                object.__setattr__(self, "REDIS_REQUIRED", True)
        return self


# Global settings instance
settings = Settings()
