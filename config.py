"""Application settings loaded from environment variables (and an optional .env)."""
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All runtime configuration for the ledger API.

    Every value can be overridden with a ``LEDGER_``-prefixed environment
    variable, e.g. ``LEDGER_SESSION_SECRET``. ``DATABASE_URL`` is also read
    without the prefix so the usual deployment variable keeps working.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "ledger"
    version: str = "0.1.0"

    database_url: str = Field(
        default="sqlite:///./ledger.db",
        validation_alias=AliasChoices("LEDGER_DATABASE_URL", "DATABASE_URL"),
    )
    db_connect_retries: int = Field(default=10, ge=1)
    db_connect_delay: float = Field(default=2.0, ge=0)

    # Rotating the secret invalidates every outstanding session.
    session_secret: str = "CHANGE_ME_TO_SOMETHING_RANDOM_AND_SECRET"
    session_algorithm: str = "HS256"
    session_ttl_days: int = Field(default=7, ge=1)

    cookie_name: str = "token"
    cookie_secure: bool = True
    cookie_samesite: str = Field(default="none", pattern="^(lax|strict|none)$")

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, built once on first use."""
    return Settings()
