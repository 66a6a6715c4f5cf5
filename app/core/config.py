# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "membership-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8000"))

    # Record store: memory | sql | document
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "memory").lower()
    STORE_TIMEOUT: float = float(os.getenv("STORE_TIMEOUT", "10.0"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./members.db")
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    DOCUMENT_STORE_URL: str = os.getenv("DOCUMENT_STORE_URL", "http://document-store:8080/v1")
    DOCUMENT_STORE_API_KEY: str = os.getenv("DOCUMENT_STORE_API_KEY", "")
    DOCUMENT_COLLECTION: str = os.getenv("DOCUMENT_COLLECTION", "members")

    # Auth
    AUTH_USERS: str = os.getenv("AUTH_USERS", "")
    MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))
    MAX_FAILED_LOGINS: int = int(os.getenv("MAX_FAILED_LOGINS", "5"))
    LOGIN_LOCKOUT_SECONDS: int = int(os.getenv("LOGIN_LOCKOUT_SECONDS", "300"))
    # Idle sessions are dropped after this many seconds; 0 disables expiry
    SESSION_TTL_SECONDS: int = int(os.getenv("SESSION_TTL_SECONDS", "28800"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
