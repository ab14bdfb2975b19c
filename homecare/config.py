import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./homecare.db")

# Connection pool settings (ignored for SQLite)
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "30"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
DB_LOG_SLOW_QUERIES = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
DB_SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))
# PostgreSQL statement timeout in milliseconds, 0 disables it
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "0"))

# Day view window, whole clock hours [start, end)
DAY_VIEW_START_HOUR = int(os.getenv("DAY_VIEW_START_HOUR", "6"))
DAY_VIEW_END_HOUR = int(os.getenv("DAY_VIEW_END_HOUR", "22"))
if not 0 <= DAY_VIEW_START_HOUR < DAY_VIEW_END_HOUR <= 24:
    raise RuntimeError(
        f"Invalid day view window {DAY_VIEW_START_HOUR}-{DAY_VIEW_END_HOUR}; "
        "expected 0 <= start < end <= 24"
    )

# Minimum rendered height of an event in the day view, in minutes
MIN_DISPLAY_MINUTES = int(os.getenv("MIN_DISPLAY_MINUTES", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS - comma separated list of origins for the admin frontend
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

# API server (run_server.py)
SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))
SERVER_RELOAD = os.getenv("SERVER_RELOAD", "false").lower() == "true"
