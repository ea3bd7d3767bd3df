"""Attendance and payroll endpoints for API v1."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action
from obravista.database.db import get_db
from obravista.schemas.attendance import (
    AttendanceRecordResponse,
    AttendanceUpsertRequest,
    DeductionCreateRequest,
    DeductionResponse,
)
from obravista.schemas.common import ok, serialize
from obravista.services.attendance_service import AttendanceService

router = APIRouter(prefix="/attendance", tags=["attendance"])

ATTENDANCE = "prestadores"
PAYROLL = "financeiro"


@router.get("", dependencies=[Depends(authorize(ATTENDANCE, Action.READ))])
def daily_sheet(day: date = Query(alias="date"), db: Session = Depends(get_db)) -> dict:
    entries = AttendanceService(db).daily_sheet(day)
    return ok([entry.model_dump(mode="json") for entry in entries])


@router.post("", dependencies=[Depends(authorize(ATTENDANCE, Action.EDIT))])
def upsert_attendance(payload: AttendanceUpsertRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(AttendanceRecordResponse, AttendanceService(db).upsert(payload)))


@router.get("/payroll", dependencies=[Depends(authorize(PAYROLL, Action.READ))])
def payroll(start: date, end: date, db: Session = Depends(get_db)) -> dict:
    lines = AttendanceService(db).payroll(start, end)
    return ok([line.model_dump(mode="json") for line in lines])


@router.get("/deductions", dependencies=[Depends(authorize(PAYROLL, Action.READ))])
def list_deductions(
    contractor_id: int,
    start: date | None = None,
    end: date | None = None,
    db: Session = Depends(get_db),
) -> dict:
    return ok(serialize(DeductionResponse, AttendanceService(db).list_deductions(contractor_id, start, end)))


@router.post(
    "/deductions",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(PAYROLL, Action.CREATE))],
)
def add_deduction(payload: DeductionCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(DeductionResponse, AttendanceService(db).add_deduction(payload)))
