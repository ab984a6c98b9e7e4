from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # App Config
    APP_NAME: str = "EvalHub Evaluation Catalog"
    APP_VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development" # "development" or "production"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Content
    CONTENT_DIR: str = "content"

    # Redis Config (view counters)
    REDIS_ENABLED: bool = True
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_PASSWORD: Optional[str] = None
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_SOCKET_TIMEOUT: int = 5
    REDIS_SOCKET_CONNECT_TIMEOUT: int = 5
    REDIS_KEY_PREFIX: str = "evalhub"
    VIEW_HISTORY_LIMIT: int = 1000 # raw view records kept per path

    # Filtering / comparison
    URL_SYNC_DEBOUNCE_MS: int = 100
    MAX_COMPARISON_ITEMS: int = 4

    # Analytics stats
    STATS_DEFAULT_LIMIT: int = 10
    STATS_MAX_LIMIT: int = 50

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
