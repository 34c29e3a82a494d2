from pydantic_settings import BaseSettings

DEFAULT_SECRET_KEY = "change-me-in-production"


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./insightpro.db"
    REDIS_URL: str = "redis://localhost:6379/0"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Token signing
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_TTL_MINUTES: int = 60

    # Require a bearer token on POST/PUT/DELETE /products
    PROTECT_PRODUCT_WRITES: bool = False

    # Cache TTLs
    CACHE_TTL_LIST: int = 60
    CACHE_TTL_DETAIL: int = 300

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
