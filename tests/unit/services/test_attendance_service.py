from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from obravista.core.enums import ContractType
from obravista.core.exceptions import NotFoundError, ValidationError
from obravista.models import AttendanceRecord
from obravista.schemas.attendance import AttendanceUpsertRequest, DeductionCreateRequest
from obravista.services.attendance_service import AttendanceService

DAY = date(2024, 3, 4)


def _mark(service, seed, day=DAY, present=True):
    return service.upsert(
        AttendanceUpsertRequest(
            date=day,
            contractor_id=seed["mason"].id,
            present=present,
            site_id=seed["site"].id if present else None,
        )
    )


def test_daily_sheet_lists_tracked_contractors_only(session, seed):
    entries = AttendanceService(db=session).daily_sheet(DAY)

    assert [entry.name for entry in entries] == ["Joao Pedreiro"]
    assert entries[0].present is False
    assert entries[0].record_id is None


def test_upsert_keeps_one_record_per_day(session, seed):
    service = AttendanceService(db=session)
    first = _mark(service, seed)
    entry = service.daily_sheet(DAY)[0]
    assert entry.present is True
    assert entry.site_name == "Casa Jardim"

    second = _mark(service, seed, present=False)
    assert second.id == first.id
    assert second.present is False
    assert second.site_id is None
    assert session.query(AttendanceRecord).count() == 1


def test_upsert_rejects_untracked_and_unknown(session, seed):
    service = AttendanceService(db=session)
    with pytest.raises(ValidationError):
        service.upsert(AttendanceUpsertRequest(date=DAY, contractor_id=seed["office"].id, present=False))
    with pytest.raises(NotFoundError):
        service.upsert(AttendanceUpsertRequest(date=DAY, contractor_id=999, present=False))
    with pytest.raises(NotFoundError):
        service.upsert(AttendanceUpsertRequest(date=DAY, contractor_id=seed["mason"].id, present=True, site_id=999))


def test_deductions_filter_by_period(session, seed):
    service = AttendanceService(db=session)
    service.add_deduction(
        DeductionCreateRequest(contractor_id=seed["mason"].id, date=date(2024, 3, 10), amount=Decimal("50"))
    )
    service.add_deduction(
        DeductionCreateRequest(contractor_id=seed["mason"].id, date=date(2024, 4, 2), amount=Decimal("30"))
    )

    assert len(service.list_deductions(seed["mason"].id)) == 2
    march = service.list_deductions(seed["mason"].id, date(2024, 3, 1), date(2024, 3, 31))
    assert [deduction.amount for deduction in march] == [Decimal("50.00")]


def test_payroll_for_a_month(session, seed):
    service = AttendanceService(db=session)
    _mark(service, seed, day=date(2024, 3, 4))
    _mark(service, seed, day=date(2024, 3, 5))
    _mark(service, seed, day=date(2024, 3, 6), present=False)
    service.add_deduction(
        DeductionCreateRequest(contractor_id=seed["mason"].id, date=date(2024, 3, 10), amount=Decimal("50"))
    )

    lines = {line.name: line for line in service.payroll(date(2024, 3, 1), date(2024, 3, 31))}

    mason = lines["Joao Pedreiro"]
    assert mason.days_worked == 2
    assert mason.gross == Decimal("400.00")
    assert mason.deductions == Decimal("50.00")
    assert mason.total == Decimal("350.00")

    office = lines["Ana Escritorio"]
    assert office.contract_type is ContractType.PAYROLL
    assert office.gross == Decimal("3000.00")
    assert office.total == Decimal("3000.00")


def test_payroll_skips_daily_workers_without_presence(session, seed):
    lines = AttendanceService(db=session).payroll(date(2024, 3, 1), date(2024, 3, 15))
    assert [line.name for line in lines] == ["Ana Escritorio"]
    # Only the pay day (5th) falls in the first half of the month.
    assert lines[0].gross == Decimal("1800.00")


def test_payroll_rejects_inverted_period(session, seed):
    with pytest.raises(ValidationError):
        AttendanceService(db=session).payroll(date(2024, 3, 31), date(2024, 3, 1))
