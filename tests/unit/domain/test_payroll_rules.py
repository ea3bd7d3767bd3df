from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from obravista.core.enums import ContractType
from obravista.core.exceptions import ValidationError
from obravista.domain.payroll import PayTerms, gross_pay, net_pay, period_days


def test_daily_rate_contractors_are_paid_per_day_present():
    terms = PayTerms(contract_type=ContractType.DAILY_RATE, daily_rate=Decimal("180"))
    assert gross_pay(terms, 4, date(2024, 3, 1), date(2024, 3, 15)) == Decimal("720.00")

    fixed = PayTerms(contract_type=ContractType.FIXED_PRICE, daily_rate=Decimal("250"))
    assert gross_pay(fixed, 2, date(2024, 3, 1), date(2024, 3, 15)) == Decimal("500.00")


def test_payroll_contractors_follow_pay_and_advance_days():
    terms = PayTerms(
        contract_type=ContractType.PAYROLL,
        salary=Decimal("3000"),
        advance_amount=Decimal("1200"),
    )
    # Default pay day 5 falls in the first half, advance day 20 in the second.
    assert gross_pay(terms, 0, date(2024, 3, 1), date(2024, 3, 15)) == Decimal("1800.00")
    assert gross_pay(terms, 0, date(2024, 3, 16), date(2024, 3, 31)) == Decimal("1200.00")
    assert gross_pay(terms, 0, date(2024, 3, 1), date(2024, 3, 31)) == Decimal("3000.00")
    assert gross_pay(terms, 0, date(2024, 3, 6), date(2024, 3, 19)) == Decimal("0.00")


def test_custom_pay_days_override_defaults():
    terms = PayTerms(
        contract_type=ContractType.PAYROLL,
        salary=Decimal("2000"),
        advance_amount=Decimal("800"),
        pay_day=10,
        advance_day=25,
    )
    assert gross_pay(terms, 0, date(2024, 3, 1), date(2024, 3, 15)) == Decimal("1200.00")


def test_net_pay_and_period_validation():
    assert net_pay(Decimal("720.00"), Decimal("120.50")) == Decimal("599.50")
    assert len(period_days(date(2024, 2, 28), date(2024, 3, 1))) == 3
    with pytest.raises(ValidationError):
        period_days(date(2024, 3, 2), date(2024, 3, 1))
