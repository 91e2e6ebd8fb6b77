from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console output

    # Definitions
    EAGER_PATTERNS: bool = False  # Compile pattern checks when the type is defined
    DEFAULT_ERROR_POLICY: str = "unit"  # "unit" (one tag per check) or "collapsed"

    class Config:
        env_prefix = "STRYPE_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
