"""Budget (orcamento) schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from obravista.core.enums import BudgetItemKind


class BudgetItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    wbs: str | None = None
    code: str | None = None
    description: str
    unit: str | None = None
    kind: BudgetItemKind
    quantity: Decimal = Decimal("0")
    unit_cost: Decimal = Decimal("0")
    sale_total: Decimal = Decimal("0")


class BudgetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    site_id: int | None = None
    name: str
    bdi: Decimal = Decimal("0")
    is_template: bool = False
    direct_cost: Decimal = Decimal("0")
    sale_total: Decimal = Decimal("0")
    items: list[BudgetItemResponse] = Field(default_factory=list)
    created_at: datetime | None = None


class ImportSummary(BaseModel):
    budget_id: int
    direct_cost: Decimal
    sale_total: Decimal
    bdi: Decimal
    rows: int


class TemplateCreateRequest(BaseModel):
    budget_id: int = Field(ge=1)
    name: str | None = Field(default=None, max_length=255)


class FromTemplateRequest(BaseModel):
    site_id: int = Field(ge=1)
    template_id: int = Field(ge=1)
