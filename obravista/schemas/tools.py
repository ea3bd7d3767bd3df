"""Tool inventory and custody schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from obravista.core.enums import MovementKind, ToolStatus


class ToolCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    brand: str | None = Field(default=None, max_length=120)
    code: str | None = Field(default=None, max_length=60)
    status: ToolStatus = ToolStatus.AVAILABLE


class ToolUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    brand: str | None = Field(default=None, max_length=120)
    code: str | None = Field(default=None, max_length=60)
    status: ToolStatus | None = None


class CustodyRequest(BaseModel):
    site_id: int = Field(ge=1)
    responsible_id: int = Field(ge=1)
    note: str | None = Field(default=None, max_length=2000)


class ReturnRequest(BaseModel):
    note: str | None = Field(default=None, max_length=2000)


class ToolLocation(BaseModel):
    site_id: int
    responsible_id: int
    checked_out_at: datetime


class ToolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    brand: str | None = None
    code: str | None = None
    status: ToolStatus
    location: ToolLocation | None = None


class MovementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tool_id: int
    kind: MovementKind
    site_id: int | None = None
    responsible_id: int | None = None
    note: str | None = None
    occurred_at: datetime


class ToolStats(BaseModel):
    total: int
    available: int
    in_use: int
    maintenance: int
    lost: int
