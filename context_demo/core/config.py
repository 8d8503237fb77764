"""Application settings"""
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Defaults for the demo client, overridable through CONTEXT_* env vars or .env"""

    APP_NAME: str = "context-demo"

    # Context API endpoint
    API_SERVER_URL: str = "context-api-test.seleritycorp.com"
    API_KEY: str = ""
    REQUEST_TIMEOUT_S: float = 30.0

    # Polling
    PAUSE_SECS: int = 30  # back-off before follow-up UPDATE queries
    BATCH_SIZE: int = 10
    MAX_ENTITIES: int = 20  # upper bound for DDS results per query

    # Entity detail cache
    ENTITY_CACHE_TTL_S: int = 10 * 60
    ENTITY_CACHE_MAX_SIZE: int = 1000

    # Build identification for the User-Agent header
    BUILD_VCS_ID: str = "unknown"
    BUILD_TIME: str = "unknown"

    LOG_LEVEL: str = "WARNING"

    SUPPORT_EMAIL_ADDRESS: str = "support@selerityinc.com"

    class Config:
        env_prefix = "CONTEXT_"
        env_file = str(Path.cwd() / ".env")
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Settings singleton"""
    return Settings()

