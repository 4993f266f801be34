"""
Application Configuration

Settings are loaded from environment variables (and an optional .env file)
via pydantic-settings. Import the module-level ``settings`` singleton
throughout the app.

Database and Redis URLs can be given whole (DATABASE_URL / REDIS_URL) or
assembled from their components (DB_HOST, DB_PORT, ... / REDIS_HOST, ...).
"""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Lab Recruitment API"
    python_env: str = "development"
    log_level: str = "INFO"
    server_port: int = 8080
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Database
    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "lab_recruitment"
    db_echo: bool = False

    # Redis
    redis_url: str = ""
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0

    # JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "lab-recruitment-platform"
    jwt_expire_minutes: int = 60 * 24
    jwt_refresh_expire_days: int = 7

    # Email
    smtp_host: str = "smtp.qq.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = Field("", validation_alias=AliasChoices("smtp_password", "smtp_pass"))
    email_from: str = ""
    resend_api_key: str = ""

    # Verification codes
    verification_code_ttl_seconds: int = 300
    verification_bypass_code: str = ""

    @model_validator(mode="after")
    def _assemble_connection_urls(self) -> "Settings":
        if not self.database_url:
            password = quote_plus(self.db_password)
            self.database_url = (
                f"postgresql+asyncpg://{self.db_user}:{password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        if not self.redis_url:
            auth = f":{quote_plus(self.redis_password)}@" if self.redis_password else ""
            self.redis_url = f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return self

    @property
    def is_development(self) -> bool:
        return self.python_env.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.python_env.lower() == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS origins as a list (comma separated in the environment)."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    @property
    def email_test_mode(self) -> bool:
        """True when no email transport is configured; emails are only logged."""
        return not self.resend_api_key and not self.smtp_configured

    @property
    def email_sender(self) -> str:
        return self.email_from or self.smtp_user or "Lab Recruitment <noreply@lab.local>"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()
