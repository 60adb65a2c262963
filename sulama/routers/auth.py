from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from sulama.core.config import get_settings
from sulama.core.rate_limiter import rate_limit_ip
from sulama.core.utils import payload_model
from sulama.services.auth_service import AuthService

router = APIRouter(tags=["auth"])
auth_service = AuthService()


class CredentialsIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PurchaseIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    package_type: Optional[str] = Field(default=None, alias="packageType")


def _auth_limit() -> int:
    return get_settings().auth_rate_limit


@router.post("/register")
async def register(request: Request, body: CredentialsIn = Depends(payload_model(CredentialsIn))):
    rate_limit_ip(request, "auth:register", limit=_auth_limit())
    return auth_service.register(body.email, body.password)


@router.post("/login")
async def login(request: Request, body: CredentialsIn = Depends(payload_model(CredentialsIn))):
    rate_limit_ip(request, "auth:login", limit=_auth_limit())
    return auth_service.login(body.email, body.password)


@router.post("/purchase")
async def purchase(body: PurchaseIn = Depends(payload_model(PurchaseIn))):
    return auth_service.purchase(body.email, body.package_type)
