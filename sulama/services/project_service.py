"""Saved design projects (listing, lookup, removal)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sulama.core.errors import NotFoundError, ValidationError
from sulama.domain.pagination import paginate
from sulama.repositories import json_storage

SUMMARY_LENGTH = 400
DEFAULT_PER_PAGE = 20


def new_design_project(reply: str, design_data: Any, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    title = design_data.get("title") if isinstance(design_data, dict) else None
    if not title:
        title = f"Özel Tasarım - {now.astimezone().strftime('%d.%m.%Y %H:%M:%S')}"
    return {
        "id": str(int(now.timestamp() * 1000)),
        "title": title,
        "type": "design",
        "createdAt": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "summary": reply[:SUMMARY_LENGTH],
        "content": reply,
        "rawDesignData": design_data or {},
    }


def _project_list_item(project: dict) -> dict:
    return {
        "id": project.get("id"),
        "title": project.get("title"),
        "type": project.get("type"),
        "createdAt": project.get("createdAt"),
        "summary": project.get("summary") or "",
    }


def _load_owner(email: str | None) -> tuple[list[dict], dict]:
    users = json_storage.load_users()
    user = json_storage.find_user(users, email)
    if not user:
        raise NotFoundError("Kullanıcı bulunamadı.")
    return users, user


def _projects(user: dict) -> list[dict]:
    projects = user.get("projects")
    return [p for p in projects if isinstance(p, dict)] if isinstance(projects, list) else []


def list_projects(email: str | None, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> dict:
    if not email:
        raise ValidationError("email parametresi zorunlu.")
    _, user = _load_owner(email)
    result = paginate([_project_list_item(p) for p in _projects(user)], page, per_page)
    return {
        "projects": result.items,
        "page": result.page,
        "per_page": result.per_page,
        "total": result.total,
        "pages": result.pages,
    }


def get_project(email: str | None, project_id: str | None) -> dict:
    if not email or not project_id:
        raise ValidationError("email parametresi ve id zorunludur.")
    _, user = _load_owner(email)
    for project in _projects(user):
        if project.get("id") == project_id:
            return {"project": project}
    raise NotFoundError("Proje bulunamadı.")


def delete_project(email: str | None, project_id: str | None) -> dict:
    if not email or not project_id:
        raise ValidationError("email parametresi ve id zorunludur.")
    users, user = _load_owner(email)
    projects = _projects(user)
    kept = [p for p in projects if p.get("id") != project_id]
    if len(kept) == len(projects):
        raise NotFoundError("Proje bulunamadı.")
    user["projects"] = kept
    json_storage.save_users(users)
    return {"success": True, "id": project_id}
