"""Budget arithmetic: direct cost, BDI markup and proposal pricing."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from obravista.core.enums import BudgetItemKind

CENT = Decimal("0.01")


class CostLine(Protocol):
    kind: BudgetItemKind | str
    quantity: Decimal
    unit_cost: Decimal
    sale_total: Decimal


@dataclass(frozen=True)
class BudgetTotals:
    direct_cost: Decimal
    sale_total: Decimal
    bdi: Decimal


def money(value: Decimal | float | int | str | None) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def is_cost_line(line: CostLine) -> bool:
    return BudgetItemKind(line.kind) is BudgetItemKind.COST


def global_bdi(direct_cost: Decimal, sale_total: Decimal) -> Decimal:
    """BDI percentage implied by a sale total over its direct cost."""
    if direct_cost <= 0 or sale_total <= 0:
        return Decimal("0.00")
    return ((sale_total / direct_cost - 1) * 100).quantize(CENT, rounding=ROUND_HALF_UP)


def summarize(lines: Iterable[CostLine]) -> BudgetTotals:
    """Totals over leaf cost rows; stage rows are headings and carry no cost."""
    direct = Decimal("0")
    sale = Decimal("0")
    for line in lines:
        if not is_cost_line(line):
            continue
        direct += Decimal(line.quantity or 0) * Decimal(line.unit_cost or 0)
        sale += Decimal(line.sale_total or 0)
    return BudgetTotals(direct_cost=money(direct), sale_total=money(sale), bdi=global_bdi(direct, sale))


def proposal_value(sale_total: Decimal, multiplier: Decimal) -> Decimal:
    """Budget sale total scaled by the proposal's margin multiplier."""
    if multiplier <= 0:
        raise ValueError("multiplier must be positive")
    return money(Decimal(sale_total) * Decimal(multiplier))


def next_version(existing: Iterable[int]) -> int:
    return max(existing, default=0) + 1
