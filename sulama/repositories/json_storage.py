"""
JSON-file persistence for user records.

The whole array is read on every request and rewritten on every mutation.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from sulama.core.config import get_settings
from sulama.core.security import hash_password

logger = logging.getLogger(__name__)

DEFAULT_EMAIL = "deneme@deneme.com"
DEFAULT_PASSWORD = "1234"
DEFAULT_LIMIT = 50


def users_file() -> Path:
    return get_settings().users_file


def new_user(email: str, password_hash: str, limit: int) -> dict:
    return {
        "email": email,
        "password": password_hash,
        "limit": limit,
        "used": 0,
        "memory": [],
        "projects": [],
    }


def load_users(path: Path | None = None) -> list[dict]:
    path = path or users_file()
    if not path.exists():
        default = new_user(DEFAULT_EMAIL, hash_password(DEFAULT_PASSWORD), DEFAULT_LIMIT)
        save_users([default], path)
        logger.info("Kullanıcı dosyası oluşturuldu: %s", path)
        return [default]

    try:
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return []
        users = json.loads(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.exception("users.json parse hatası: %s", path)
        return []
    if not isinstance(users, list):
        logger.error("users.json bir dizi değil: %s", path)
        return []
    return users


def save_users(users: list[dict], path: Path | None = None) -> None:
    path = path or users_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(users, ensure_ascii=False, indent=2), encoding="utf-8")


def find_user(users: list[dict], email: str | None) -> dict | None:
    if not email:
        return None
    for user in users:
        if isinstance(user, dict) and user.get("email") == email:
            return user
    return None


def remaining(user: dict) -> int:
    return int(user.get("limit") or 0) - int(user.get("used") or 0)


def user_summary(user: dict) -> dict[str, Any]:
    return {
        "success": True,
        "email": user.get("email"),
        "limit": user.get("limit"),
        "used": user.get("used"),
        "remaining": remaining(user),
    }
