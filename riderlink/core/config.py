"""
Application configuration via pydantic-settings.
All values are read from environment variables (or .env file).
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    PROJECT_NAME: str = "RiderLink Fleet API"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    TESTING: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Storage (in-memory SQLite unless pointed at a real database)
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    AUTO_CREATE_SCHEMA: bool = True
    SEED_DEMO_DATA: bool = True
    REPOSITORY_TIMEOUT_SECONDS: float = 5.0

    # Session (JWT carried in a cookie)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "riderlink_session"
    SESSION_EXPIRE_MINUTES: int = 60 * 24  # 24 hours
    SESSION_COOKIE_SECURE: bool = False

    @field_validator("SECRET_KEY")
    @classmethod
    def secret_key_min_length(cls, v: str) -> str:
        if len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("REPOSITORY_TIMEOUT_SECONDS")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("REPOSITORY_TIMEOUT_SECONDS must be positive")
        return v


settings = Settings()
