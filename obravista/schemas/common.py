"""Common schema module."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def ok(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Build a success envelope payload."""
    payload: dict[str, Any] = {"success": True, "data": data}
    if message:
        payload["message"] = message
    return payload


def fail(message: str) -> dict[str, Any]:
    """Build a failure envelope payload."""
    return {"success": False, "message": message}


def serialize(schema: type[BaseModel], value: Any) -> Any:
    """Validate ORM objects (or lists of them) through ``schema`` into JSON-ready data."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [schema.model_validate(item).model_dump(mode="json") for item in value]
    return schema.model_validate(value).model_dump(mode="json")
