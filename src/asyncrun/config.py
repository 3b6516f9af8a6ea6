"""Configuration management for asyncrun."""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings loaded from environment variables.

    Every setting has a default and can be overridden with an
    ``ASYNCRUN_``-prefixed environment variable.
    """

    # Executor
    DEFAULT_TIMEOUT_SECONDS: float = 10.0
    THREAD_NAME_PREFIX: str = "asyncrun-unit"

    # Observability
    METRICS_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_prefix="ASYNCRUN_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Singleton settings instance
    """
    return Settings()
