"""
Utility helpers shared across routers/services.
"""

from __future__ import annotations

from typing import Callable, Type, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def payload_model(model: Type[ModelT]) -> Callable:
    """
    Dependency validating the body against ``model`` whether it arrives as
    JSON or as an urlencoded form. An empty body validates as ``{}``.
    """

    async def dependency(request: Request) -> ModelT:
        content_type = (request.headers.get("content-type") or "").lower()
        try:
            if any(kind in content_type for kind in FORM_TYPES):
                form = await request.form()
                return model.model_validate({key: value for key, value in form.items() if isinstance(value, str)})
            raw = await request.body()
            return model.model_validate_json(raw if raw.strip() else b"{}")
        except ValidationError as exc:
            raise RequestValidationError(exc.errors(include_url=False)) from exc

    return dependency
