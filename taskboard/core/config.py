import os

# Detect environment (default to production)
ENV = os.getenv("APP_ENV", "production").lower()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./taskboard.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

DEV_CORS_ORIGINS = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
    "http://localhost:19006",
]
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "").split(",")
    if origin.strip()
]

# Upper bound on how many missed days the foreground catch-up will snapshot
DAILY_BACKFILL_DAYS = int(os.getenv("DAILY_BACKFILL_DAYS", "7"))

LOGGING_CONFIG_FILE = os.getenv("LOGGING_CONFIG_FILE", "logging.conf")

# Redis key the worker refreshes every minute; read by the health check
HEARTBEAT_KEY = "arq:heartbeat"
