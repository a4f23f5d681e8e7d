"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database (Supabase Postgres connection string in production)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./eventra.db")
    USE_FIREBASE: bool = os.getenv("USE_FIREBASE", "false").lower() in ("1", "true", "yes")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")

    # Security
    API_KEY: str = os.getenv("API_KEY", "eventra_api_key")

    # Application
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Email
    RESEND_API_KEY: str | None = os.getenv("RESEND_API_KEY")
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "Eventra <eventra@mail.douloop.com>")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    # Event identifiers: eventra-<creator prefix>-<random suffix>
    EVENT_ID_PREFIX_LENGTH: int = 8
    EVENT_ID_SUFFIX_LENGTH: int = 5
    EVENT_ID_MAX_ATTEMPTS: int = 5

    # One-on-one event limits
    ONE_ON_ONE_MAX_SLOTS: int = 10
    ONE_ON_ONE_MIN_GAP_MINUTES: int = 30

    class Config:
        env_file = ".env"

settings = Settings()
