"""Construction site (obra) schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from obravista.core.enums import SiteStatus


class SiteCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(default="A configurar", max_length=500)
    description: str | None = Field(default=None, max_length=5000)
    status: SiteStatus = SiteStatus.BUDGETING
    start_date: date | None = None
    end_date: date | None = None


class SiteUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = Field(default=None, max_length=500)
    description: str | None = Field(default=None, max_length=5000)
    status: SiteStatus | None = None
    start_date: date | None = None
    end_date: date | None = None


class SiteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    description: str | None = None
    status: SiteStatus
    start_date: date | None = None
    end_date: date | None = None
    lead_id: int | None = None
    estimated_budget: Decimal | None = None
    created_at: datetime | None = None
