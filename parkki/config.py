# parkki/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./parkki.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "0.0.0.0"
    BACKEND_PORT: int = 3000

    # ── Ingestion ─────────────────────────────────────────────────────────
    MAX_BATCH_SIZE: int = 500          # Events accepted per submit call
    EVENTS_LIST_LIMIT: int = 50        # Default page size for GET /events
    EVENTS_LIST_MAX_LIMIT: int = 500   # Largest page GET /events will return

    # ── Live subscribers ──────────────────────────────────────────────────
    BROADCAST_SEND_TIMEOUT_SECONDS: float = 2.0   # Slow subscriber is dropped after this
    WS_HEARTBEAT_SECONDS: int = 30

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILE: str = "events.log"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
