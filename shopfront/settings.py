# shopfront/settings.py
from __future__ import annotations

import logging
import os
from typing import List

from pydantic import BaseModel

# Load .env locally (safe in prod too)
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    pass


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except Exception:
        return default


def _list_env(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [x.strip() for x in raw.split(",") if x.strip()]


# -------------------
# Config (env-driven)
# -------------------
class Settings(BaseModel):
    # Empty string disables the external store entirely (memory only)
    database_url: str = os.getenv(
        "DATABASE_URL", "mysql+pymysql://root@localhost:3306/ecommerce_db"
    ).strip()
    db_connect_timeout: int = _int_env("DB_CONNECT_TIMEOUT", 5)

    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_alg: str = os.getenv("JWT_ALG", "HS256")
    jwt_expire_minutes: int = _int_env("JWT_EXPIRE_MIN", 1440)

    cors_origins: List[str] = _list_env("CORS_ORIGINS", "*")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    port: int = _int_env("PORT", 3001)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
