"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database (DATABASE_URL wins over the PostgreSQL parts when set)
    database_url: str = ""
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "talentos_user"
    postgres_password: str = "password"
    postgres_db: str = "talentos_db"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 240

    # SMTP (welcome emails)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_sender: str = ""
    smtp_password: str = ""
    smtp_timeout_seconds: int = 20

    # AI assistant (OpenAI-compatible)
    ai_api_key: str = ""
    ai_base_url: str = "https://api.deepseek.com/v1"
    ai_model: str = "deepseek-chat"

    # App
    debug: bool = False
    log_level: str = "INFO"
    max_upload_mb: int = 10

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or self.postgres_url

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
