# task_api/config.py
"""Environment-driven settings for the task API."""

import os
from pathlib import Path

DB_PATH = Path(__file__).parent / "tasks.db"
DATABASE_URL = os.getenv("TASK_API_DATABASE_URL", f"sqlite:///{DB_PATH}")
SQL_ECHO = os.getenv("TASK_API_SQL_ECHO", "").lower() in ("1", "true", "yes")

HOST = os.getenv("TASK_API_HOST", "0.0.0.0")
PORT = int(os.getenv("TASK_API_PORT", "8080"))
LOG_LEVEL = os.getenv("TASK_API_LOG_LEVEL", "INFO").upper()

ALLOWED_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173,http://localhost:8080",
).split(",")
