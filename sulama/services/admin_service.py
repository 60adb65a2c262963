"""Operator actions behind the admin key."""

from __future__ import annotations

import logging
from typing import Optional

from sulama.core.errors import NotFoundError, ValidationError
from sulama.repositories import json_storage
from sulama.repositories.catalog import CatalogStore

logger = logging.getLogger(__name__)


def update_user(
    email: Optional[str],
    limit: Optional[int] = None,
    reset_used: bool = False,
    reset_memory: bool = False,
) -> dict:
    if not email:
        raise ValidationError("email zorunlu.")
    users = json_storage.load_users()
    user = json_storage.find_user(users, email)
    if not user:
        raise NotFoundError("Kullanıcı bulunamadı.")

    if limit is not None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise ValidationError("limit negatif olmayan bir tam sayı olmalı.")
        user["limit"] = limit
    if reset_used:
        user["used"] = 0
    if reset_memory:
        user["memory"] = []

    json_storage.save_users(users)
    logger.info("Admin kullanıcı güncelledi: %s", email)
    return json_storage.user_summary(user)


def list_users() -> dict:
    users = json_storage.load_users()
    items = []
    for user in users:
        if not isinstance(user, dict):
            continue
        summary = json_storage.user_summary(user)
        summary.pop("success", None)
        summary["memory"] = len(user.get("memory") or [])
        summary["projects"] = len(user.get("projects") or [])
        items.append(summary)
    return {"users": items, "total": len(items)}


def delete_user(email: str) -> dict:
    users = json_storage.load_users()
    user = json_storage.find_user(users, email)
    if not user:
        raise NotFoundError("Kullanıcı bulunamadı.")
    users.remove(user)
    json_storage.save_users(users)
    logger.info("Admin kullanıcı sildi: %s", email)
    return {"success": True, "email": email}


def reload_catalog(store: CatalogStore) -> dict:
    catalog = store.reload()
    return {"success": True, "counts": catalog.counts()}
