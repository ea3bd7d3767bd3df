"""CRM request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from obravista.core.enums import DealStage, InteractionKind, LeadStatus


class LeadCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    company: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=40)
    document: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=500)


class LeadUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    company: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=40)
    document: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=500)


class LeadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    document: str | None = None
    address: str | None = None
    status: LeadStatus = LeadStatus.NEW
    created_at: datetime | None = None


class DealCreateRequest(BaseModel):
    lead_id: int = Field(ge=1)
    title: str = Field(min_length=1, max_length=255)
    estimated_value: Decimal = Field(default=Decimal("0"), ge=0)
    stage: DealStage = DealStage.PROSPECTING
    site_id: int | None = Field(default=None, ge=1)


class DealUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    estimated_value: Decimal | None = Field(default=None, ge=0)
    site_id: int | None = Field(default=None, ge=1)


class DealStageUpdateRequest(BaseModel):
    stage: DealStage


class DealWinRequest(BaseModel):
    start_date: date | None = None


class DealLoseRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=2000)


class DealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lead_id: int
    title: str
    estimated_value: Decimal = Decimal("0")
    stage: DealStage
    site_id: int | None = None
    loss_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class InteractionCreateRequest(BaseModel):
    kind: InteractionKind
    text: str = Field(min_length=1, max_length=10000)
    occurred_at: datetime | None = None


class InteractionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    deal_id: int
    kind: InteractionKind
    text: str
    user_id: int | None = None
    occurred_at: datetime


class ProposalCreateRequest(BaseModel):
    value: Decimal | None = Field(default=None, ge=0)
    multiplier: Decimal = Field(default=Decimal("1"), gt=0)
    notes: str | None = Field(default=None, max_length=10000)
    validity_days: int = Field(default=30, ge=1, le=365)


class ProposalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    deal_id: int
    budget_id: int | None = None
    version: int
    multiplier: Decimal
    value: Decimal
    notes: str | None = None
    validity_days: int
    pdf_url: str
    created_at: datetime | None = None


class SurveyUpsertRequest(BaseModel):
    answers: dict[str, Any] = Field(default_factory=dict)


class SurveyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    deal_id: int
    answers: dict[str, Any]
    updated_at: datetime | None = None


class PipelineStats(BaseModel):
    total: int
    won: int
    lost: int
    open_value: Decimal
    conversion_rate: float
