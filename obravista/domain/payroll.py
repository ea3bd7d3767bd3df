"""Timesheet (folha de ponto) payment rules for a period."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from obravista.core.enums import ContractType
from obravista.core.exceptions import ValidationError
from obravista.domain.budget import money

DEFAULT_PAY_DAY = 5
DEFAULT_ADVANCE_DAY = 20


@dataclass(frozen=True)
class PayTerms:
    contract_type: ContractType
    daily_rate: Decimal | None = None
    salary: Decimal | None = None
    advance_amount: Decimal | None = None
    pay_day: int | None = None
    advance_day: int | None = None


def period_days(start: date, end: date) -> list[date]:
    if end < start:
        raise ValidationError("Period end must not precede its start.")
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def gross_pay(terms: PayTerms, days_worked: int, start: date, end: date) -> Decimal:
    """Amount owed for the period before deductions.

    Payroll contractors are paid by calendar: the advance when the advance day
    falls in the period and the salary balance when the pay day does. Everyone
    else is paid per day present.
    """
    if terms.contract_type is not ContractType.PAYROLL:
        return money(Decimal(days_worked) * Decimal(terms.daily_rate or 0))

    days_of_month = {day.day for day in period_days(start, end)}
    salary = Decimal(terms.salary or 0)
    advance = Decimal(terms.advance_amount or 0)
    total = Decimal("0")
    if (terms.advance_day or DEFAULT_ADVANCE_DAY) in days_of_month:
        total += advance
    if (terms.pay_day or DEFAULT_PAY_DAY) in days_of_month:
        total += salary - advance
    return money(total)


def net_pay(gross: Decimal, deductions: Decimal) -> Decimal:
    return money(Decimal(gross) - Decimal(deductions))
