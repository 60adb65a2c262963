from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from sulama.core.config import get_settings
from sulama.core.errors import ForbiddenError
from sulama.core.security import keys_match
from sulama.core.utils import payload_model
from sulama.services import admin_service


def require_admin(request: Request) -> None:
    if not keys_match(request.headers.get("x-admin-key"), get_settings().admin_key):
        raise ForbiddenError("Geçersiz admin anahtarı.")


class UpdateUserIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    # strict: "500", 2.5, true and overflowing numbers are rejected
    limit: Optional[Annotated[int, Field(ge=0, strict=True)]] = None
    reset_used: bool = Field(default=False, alias="resetUsed")
    reset_memory: bool = Field(default=False, alias="resetMemory")


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/update-user")
async def update_user(body: UpdateUserIn = Depends(payload_model(UpdateUserIn))):
    return admin_service.update_user(
        body.email,
        limit=body.limit,
        reset_used=body.reset_used,
        reset_memory=body.reset_memory,
    )


@router.get("/users")
def list_users():
    return admin_service.list_users()


@router.delete("/users/{email}")
def delete_user(email: str):
    return admin_service.delete_user(email)


@router.post("/reload-data")
def reload_data(request: Request):
    return admin_service.reload_catalog(request.app.state.catalog)
