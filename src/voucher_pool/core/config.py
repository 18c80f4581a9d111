"""Application settings for the voucher pool service."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration values."""

    model_config = SettingsConfigDict(
        env_prefix="VOUCHER_POOL_",
        env_file=".env",
        case_sensitive=False,
    )

    database_url: str = Field(
        default="postgresql+psycopg2://user:mysecretpassword@db:5432/postgres",
        description="SQLAlchemy database URL for PostgreSQL instance.",
    )
    sql_echo: bool = Field(default=False, description="Log every SQL statement.")
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    request_timeout_seconds: float = Field(
        default=60,
        gt=0,
        description="Upper bound for a single database statement; exceeding it aborts the transaction.",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
