"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]
OUTPUT_DIR: Path = Path(os.getenv("GROWTHLENS_OUTPUT_DIR", str(PROJECT_ROOT / "out")))

# ── Metrics API ────────────────────────────────────────────────────────────
API_URL: str = os.getenv("GROWTHLENS_API_URL", "")
API_TOKEN: str = os.getenv("GROWTHLENS_API_TOKEN", "")
API_TIMEOUT: int = int(os.getenv("GROWTHLENS_API_TIMEOUT", "30"))

# ── Trend defaults (overridden at runtime by CLI) ─────────────────────────
DEFAULT_PERIOD: str = os.getenv("GROWTHLENS_PERIOD", "weekly")
DEFAULT_LIMIT: int = int(os.getenv("GROWTHLENS_LIMIT", "12"))

# ── Logging ────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("GROWTHLENS_LOG_LEVEL", "INFO").upper()


def api_enabled() -> bool:
    """True when both the API base URL and bearer token are configured."""
    return bool(API_URL and API_TOKEN)
