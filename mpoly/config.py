"""Application configuration using Pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "mpoly_secret_key_2025"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Read once at process start by ``create_app``; request handlers only ever
    see the values injected into the services.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Authentication
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 8

    # Document store
    data_dir: Path = Path("data")
    users_file: str = "users.xml"
    records_file: str = "records.xml"

    # Request handling
    max_delay_ms: int = 10_000
    api_prefix: str = ""
    cors_origins: str = "http://localhost:4200,http://127.0.0.1:4200"

    # Server
    host: str = "127.0.0.1"
    port: int = 3000

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
