"""
Configuration for FollowUply backend
"""
import os
from typing import Dict, Tuple


class Config:
    """Application configuration from environment variables"""

    # Database
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./followuply.db")

    # Server
    PORT: int = int(os.environ.get("PORT", "8000"))

    # CORS
    CORS_ORIGINS: str = os.environ.get("CORS_ORIGINS", "")

    # Delete confirmation: how long an undo stays available
    UNDO_WINDOW_SECONDS: int = int(os.environ.get("UNDO_WINDOW_SECONDS", "6"))

    # How long a toast stays on screen
    TOAST_DURATION_MS: int = int(os.environ.get("TOAST_DURATION_MS", "3000"))

    # Local UI preferences (dark mode, language, cached profile)
    PREFERENCES_PATH: str = os.environ.get("PREFERENCES_PATH", "./followuply-preferences.json")

    # Optional audit sheet (base64 encoded service account)
    AUDIT_SHEET_ID: str = os.environ.get("AUDIT_SHEET_ID", "")
    GOOGLE_SERVICE_ACCOUNT_B64: str = os.environ.get("GOOGLE_SERVICE_ACCOUNT_B64", "")

    # Per-action limits: action -> (max calls, window in seconds)
    RATE_LIMITS: Dict[str, Tuple[int, int]] = {
        "clients:create": (10, 60),
        "clients:update": (30, 60),
        "clients:delete": (10, 60),
        "clients:search": (30, 60),
        "invoices:create": (20, 60),
        "invoices:update": (30, 60),
        "invoices:delete": (10, 60),
        "invoices:markPaid": (20, 60),
        "reminders:create": (20, 60),
        "reminders:update": (30, 60),
        "reminders:delete": (10, 60),
        "expenses:create": (30, 60),
        "expenses:update": (30, 60),
        "expenses:delete": (10, 60),
        "profiles:update": (10, 60),
        "undo": (20, 60),
        "search": (30, 60),
    }
    DEFAULT_RATE_LIMIT: Tuple[int, int] = (30, 60)

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production"""
        return os.environ.get("ENVIRONMENT", "").lower() == "production"

    @classmethod
    def get_database_url(cls) -> str:
        """Get appropriate database URL"""
        url = cls.DATABASE_URL
        # Hosted Postgres hands out postgres:// but SQLAlchemy needs postgresql://
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @classmethod
    def get_cors_origins(cls) -> list:
        """Configured origins plus local development defaults"""
        defaults = [
            "http://localhost:5173",
            "http://localhost:3000",
            "http://127.0.0.1:5173",
            "http://127.0.0.1:3000",
        ]
        extra = [o.strip() for o in cls.CORS_ORIGINS.split(",") if o.strip()]
        return list(dict.fromkeys(defaults + extra))

    @classmethod
    def rate_limit_for(cls, action: str) -> Tuple[int, int]:
        return cls.RATE_LIMITS.get(action, cls.DEFAULT_RATE_LIMIT)


config = Config()
