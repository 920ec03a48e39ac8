from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    db_pool_size: int = 5
    db_max_overflow: int = 10
    # Upper bound on the health probe round-trip; a hung database reports degraded.
    db_probe_timeout_seconds: float = 2.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # App
    app_name: str = "API Server"
    version: str = "1.0.0"
    environment: Literal["development", "test", "production"] = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()
