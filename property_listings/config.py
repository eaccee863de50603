from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    SANITY_PROJECT_ID: str = ""
    SANITY_DATASET: str = "production"
    SANITY_API_VERSION: str = "2024-01-01"
    SANITY_API_TOKEN: str | None = None
    SANITY_USE_CDN: bool = False
    SANITY_TIMEOUT: float = 30.0
    REDIS_URL: str = "redis://localhost:6379/0"
    PAGE_SIZE: int = 6
    RECENT_LIMIT: int = 12
    HEALTH_CACHE_SECONDS: int = 300
    WRITE_RATE_LIMIT: int = 20
    UPLOAD_RATE_LIMIT: int = 10
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    class Config:
        env_file = ".env"

settings = Settings()
