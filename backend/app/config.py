"""
Service configuration — single source of truth for environment-driven settings.

Import from here in main.py, middleware and routes rather than calling
os.getenv() in each module.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env in dev (no-op when the file is missing)
load_dotenv()

APP_NAME: str = "MODA Production Core API"
APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
# "json" for structured production logs, "text" for local development
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json").lower()
JSON_LOGS: bool = LOG_FORMAT != "text"

# Paths that do not emit a per-request log line
SKIP_LOG_PATHS: set[str] = {"/health"}

# ── CORS ──────────────────────────────────────────────────────────────────────
_cors_default = "http://localhost:3000,http://localhost:5173"
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _cors_default).split(",") if o.strip()
]
