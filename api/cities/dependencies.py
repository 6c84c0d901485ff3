"""
Request wiring for the city routes: repository injection and body parsing.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

import pydantic
from fastapi import Request

from core.errors import ValidationError

from .repository import CityRepository

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_repository(request: Request) -> CityRepository:
    return CityRepository(request.app.state.db, request.app.state.table_name)


async def read_body(request: Request) -> dict[str, Any]:
    """
    Return the request body as a dict, accepting JSON or form encoding.
    """
    content_type = (request.headers.get("content-type") or "").split(";", 1)[0].strip().lower()
    if content_type in _FORM_TYPES:
        form = await request.form()
        return {key: value for key, value in form.items()}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise ValidationError("Malformed JSON body") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def parse_model(model: type[ModelT], payload: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        loc = first.get("loc") or ()
        field = str(loc[0]) if loc else None
        message = f"Invalid {field}" if field else "Invalid request body"
        raise ValidationError(message, field=field) from exc
