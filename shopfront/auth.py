# shopfront/auth.py
from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from .settings import Settings


def verify_password(p: str, stored: str) -> bool:
    # Passwords are kept as typed; compare them the same way
    return hmac.compare_digest(p.encode("utf-8"), stored.encode("utf-8"))


def create_token(user: Dict[str, Any], settings: Settings) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {"sub": str(user["id"]), "role": user.get("role") or "user", "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_token(token: str, settings: Settings) -> Optional[Dict[str, Any]]:
    try:
        data = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
        return {"user_id": int(data.get("sub")), "role": data.get("role")}
    except Exception:
        return None
