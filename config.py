"""
Configuration for the character economy server.

Every value comes from the environment (optionally a .env file) and can be
overridden by passing a mapping to ``create_app``.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _database_path() -> str:
    """Resolve the sqlite file, honouring a mounted persistent disk."""
    explicit = os.environ.get("DATABASE")
    disk_path = os.environ.get("PERSISTENT_DISK_PATH")
    if disk_path:
        os.makedirs(disk_path, exist_ok=True)
        return os.path.join(disk_path, explicit or "game.db")
    return explicit or "game.db"


class Config:
    """Default settings, read once at import time."""

    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-change-me")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    DATABASE = _database_path()
    DB_TIMEOUT = float(os.environ.get("DB_TIMEOUT", "10.0"))

    REDIS_URL = os.environ.get("REDIS_URL") or None
    CHARACTER_LOCK_TIMEOUT = float(os.environ.get("CHARACTER_LOCK_TIMEOUT", "10"))

    ADMIN_USERS = os.environ.get("ADMIN_USERS", "admin")

    LOG_FILE = os.environ.get("LOG_FILE", "server.log")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    PORT = int(os.environ.get("PORT", "5000"))
