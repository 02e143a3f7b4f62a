from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    DATABASE_URL: str
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Token issuing / verification
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # External identity provider (optional). When set, bearer tokens are
    # verified against this JWKS instead of JWT_SECRET.
    AUTH_JWKS_URL: Optional[str] = None
    AUTH_AUDIENCE: Optional[str] = None

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Listings
    MAX_IMAGES_PER_PROPERTY: int = 5

    # Rent reminders
    REMINDER_LEAD_DAYS: int = 7

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
