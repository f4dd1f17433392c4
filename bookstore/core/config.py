# bookstore/core/config.py

import os
from functools import lru_cache

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./bookstore.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    SQLITE_BUSY_TIMEOUT: float = 30.0  # seconds a writer waits for the database lock

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    JWT_USER_CLAIM: str = "id"  # Claim carrying the user id in issued tokens

    # Orders
    ORDER_COMMIT_ATTEMPTS: int = 3  # Whole validate+commit attempts on a lost stock race

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
