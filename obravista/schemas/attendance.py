"""Attendance (frequencia) and payroll schemas."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from obravista.core.enums import ContractType


class AttendanceEntry(BaseModel):
    """One row of the daily sheet: a tracked contractor and their record for the day."""

    model_config = ConfigDict(from_attributes=True)

    contractor_id: int
    name: str
    specialty: str | None = None
    record_id: int | None = None
    present: bool = False
    site_id: int | None = None
    site_name: str | None = None
    note: str | None = None


class AttendanceUpsertRequest(BaseModel):
    date: dt.date
    contractor_id: int = Field(ge=1)
    present: bool
    site_id: int | None = Field(default=None, ge=1)
    note: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _present_requires_site(self) -> "AttendanceUpsertRequest":
        if self.present and self.site_id is None:
            raise ValueError("a site is required to mark a contractor present")
        return self


class AttendanceRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: dt.date
    contractor_id: int
    present: bool
    site_id: int | None = None
    note: str | None = None


class DeductionCreateRequest(BaseModel):
    contractor_id: int = Field(ge=1)
    date: dt.date
    amount: Decimal = Field(gt=0)
    description: str | None = Field(default=None, max_length=500)


class DeductionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contractor_id: int
    date: dt.date
    amount: Decimal
    description: str | None = None


class PayrollLine(BaseModel):
    contractor_id: int
    name: str
    contract_type: ContractType
    days_worked: int
    gross: Decimal
    deductions: Decimal
    total: Decimal
    pix_key_type: str | None = None
    pix_key: str | None = None
