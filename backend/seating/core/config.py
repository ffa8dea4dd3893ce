"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Reserved Seating API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_CACHE_TTL: int = 300  # 5 minutes default TTL
    REDIS_ENABLED: bool = True

    # Seat state backend: "memory" (single process) or "redis" (shared)
    SEAT_STATE_BACKEND: str = "memory"
    SEAT_STATE_KEY_PREFIX: str = "seatstate"

    # Orders
    ORDER_HOLD_SECONDS: int = 600  # 10 minutes to finish checkout

    # Expiry reaper
    REAPER_ENABLED: bool = True
    REAPER_INTERVAL_SECONDS: float = 5.0
    REAPER_MAX_BACKOFF_SECONDS: float = 60.0
    SWEEP_ON_READ: bool = False

    # Auto selection
    AUTOSELECT_MAX_RETRIES: int = 3
    AUTOSELECT_SEARCH_LIMIT: int = 200  # start seats tried per class
    AUTOSELECT_ALLOW_MIXED_CLASSES: bool = True

    # Pagination
    DEFAULT_PER_PAGE: int = 20
    MAX_PER_PAGE: int = 100

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
