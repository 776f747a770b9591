# storefront/config.py
from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

# Load .env locally (safe in prod too)
load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DATA_FILE = PROJECT_ROOT / "data" / "orders.json"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


# -------------------
# Config (env-driven)
# -------------------
class Settings(BaseModel):
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = _env_int("PORT", 3000)

    admin_password: str = os.getenv("ADMIN_PASSWORD", "admin123")
    admin_token_ttl_seconds: int = _env_int("ADMIN_TOKEN_TTL_SECONDS", 0)

    data_file: Path = Path(os.getenv("DATA_FILE", str(DEFAULT_DATA_FILE)))
    orders_database_url: str = os.getenv("ORDERS_DATABASE_URL", "").strip()

    rate_limit_window_seconds: int = _env_int("RATE_LIMIT_WINDOW_SECONDS", 60 * 60)
    rate_limit_max_posts: int = _env_int("RATE_LIMIT_MAX_POSTS", 100)
    rate_limit_max_entries: int = _env_int("RATE_LIMIT_MAX_ENTRIES", 10_000)

    log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
