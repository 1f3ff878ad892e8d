"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - PORT selects the listen port, 4000 when unset
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box with no .env
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    public_url: str = "http://localhost:4000"

    # Document store
    db_path: str = "db.json"
    id_length: int = 8

    @field_validator("id_length")
    @classmethod
    def check_id_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError("id_length must be positive")
        return v

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"


@lru_cache
def get_settings() -> Settings:
    return Settings()
