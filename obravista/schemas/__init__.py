"""Pydantic schemas for API contracts."""

from obravista.schemas.common import fail, ok, serialize

__all__ = ["fail", "ok", "serialize"]
