"""Site budgets: spreadsheet import, totals and reusable templates."""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

import pandas as pd
from sqlalchemy import delete, select

from obravista.core.enums import BudgetItemKind
from obravista.core.exceptions import NotFoundError, ValidationError
from obravista.domain.budget import summarize
from obravista.models import Budget, BudgetItem, Site
from obravista.schemas.budgets import ImportSummary
from obravista.services.base_service import BaseService

logger = logging.getLogger(__name__)

BUDGET_SHEET = "Orçamento Detalhado"

# Zero-based column positions on the detailed budget sheet.
COL_WBS, COL_STAGE, COL_CODE, COL_DESCRIPTION, COL_UNIT, COL_QUANTITY = 0, 1, 2, 3, 4, 5
COL_UNIT_COST = 9
COL_SALE_TOTAL = 11


@dataclass(frozen=True)
class SheetRow:
    wbs: str | None
    code: str | None
    description: str
    unit: str | None
    kind: BudgetItemKind
    quantity: Decimal
    unit_cost: Decimal
    sale_total: Decimal


def _text(value: Any) -> str | None:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    cleaned = str(value).strip()
    return cleaned or None


def _number(value: Any, row_number: int, column: str) -> Decimal:
    """Parse a numeric cell; text cells may use Brazilian (1.234,56) or plain (1234.56) notation."""
    text = _text(value)
    if text is None:
        return Decimal("0")
    if isinstance(value, str):
        text = text.replace("R$", "").replace(" ", "")
        # The right-most separator is the decimal one; the other marks thousands.
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    try:
        number = Decimal(text)
    except InvalidOperation:
        number = None
    if number is None or not number.is_finite():
        raise ValidationError(f"Row {row_number}: {column} {value!r} is not a number.")
    return number


def _cell(row: tuple[Any, ...], index: int) -> Any:
    return row[index] if index < len(row) else None


def read_budget_sheet(content: bytes) -> list[SheetRow]:
    """Parse the detailed budget sheet of an .xlsx workbook.

    The first row is a header. Rows with a composition code are leaf cost
    rows; the rest are stage headings. Rows without a description are skipped.
    """
    try:
        workbook = pd.ExcelFile(io.BytesIO(content), engine="openpyxl")
    except Exception as exc:
        raise ValidationError("The uploaded file is not a readable .xlsx workbook.") from exc
    with workbook:
        if BUDGET_SHEET not in workbook.sheet_names:
            raise ValidationError(f'Sheet "{BUDGET_SHEET}" not found in the workbook.')
        frame = pd.read_excel(workbook, sheet_name=BUDGET_SHEET, header=None, dtype=object)

    rows: list[SheetRow] = []
    # Spreadsheet rows are 1-based and the header occupies row 1.
    for row_number, raw in enumerate(frame.iloc[1:].itertuples(index=False, name=None), start=2):
        code = _text(_cell(raw, COL_CODE))
        description = _text(_cell(raw, COL_DESCRIPTION)) or _text(_cell(raw, COL_STAGE))
        if not description:
            continue
        rows.append(
            SheetRow(
                wbs=_text(_cell(raw, COL_WBS)),
                code=code,
                description=description,
                unit=_text(_cell(raw, COL_UNIT)),
                kind=BudgetItemKind.COST if code else BudgetItemKind.STAGE,
                quantity=_number(_cell(raw, COL_QUANTITY), row_number, "quantity"),
                unit_cost=_number(_cell(raw, COL_UNIT_COST), row_number, "unit cost"),
                sale_total=_number(_cell(raw, COL_SALE_TOTAL), row_number, "sale total"),
            )
        )
    logger.info("budgets.sheet_parsed", extra={"event": "budgets.sheet_parsed", "rows": len(rows)})
    return rows


class BudgetService(BaseService):
    def get_site_budget(self, site_id: int) -> Budget:
        self._require(Site, site_id, "Site")
        budget = self.db.scalars(
            select(Budget)
            .where(Budget.site_id == site_id, Budget.is_template.is_(False))
            .order_by(Budget.id.desc())
        ).first()
        if budget is None:
            raise NotFoundError(f"Site {site_id} has no budget.")
        return budget

    def import_workbook(self, site_id: int, content: bytes) -> ImportSummary:
        """Replace the site's budget with the contents of an .xlsx workbook."""
        self._require(Site, site_id, "Site")
        rows = read_budget_sheet(content)

        self._drop_site_budgets(site_id)
        budget = Budget(site_id=site_id, name=f"Budget imported on {date.today():%d/%m/%Y}")
        budget.items = [
            BudgetItem(
                position=position,
                wbs=row.wbs,
                code=row.code,
                description=row.description,
                unit=row.unit,
                kind=row.kind,
                quantity=row.quantity,
                unit_cost=row.unit_cost,
                sale_total=row.sale_total,
            )
            for position, row in enumerate(rows)
        ]
        totals = summarize(budget.items)
        budget.bdi = totals.bdi
        self.db.add(budget)
        self.commit()
        self.db.refresh(budget)

        logger.info(
            "budgets.imported",
            extra={"event": "budgets.imported", "site_id": site_id, "budget_id": budget.id, "bdi": str(totals.bdi)},
        )
        return ImportSummary(
            budget_id=budget.id,
            direct_cost=totals.direct_cost,
            sale_total=totals.sale_total,
            bdi=totals.bdi,
            rows=len(rows),
        )

    def save_as_template(self, budget_id: int, name: str | None = None) -> Budget:
        original = self._require(Budget, budget_id, "Budget")
        template = self._clone(original, site_id=None, name=name or f"Template: {original.name}", is_template=True)
        self.commit()
        self.db.refresh(template)
        return template

    def list_templates(self) -> list[Budget]:
        query = select(Budget).where(Budget.is_template.is_(True)).order_by(Budget.created_at.desc(), Budget.id.desc())
        return list(self.db.scalars(query))

    def create_from_template(self, site_id: int, template_id: int) -> Budget:
        """Give a site a fresh budget copied from a template, replacing any it had."""
        self._require(Site, site_id, "Site")
        template = self._require(Budget, template_id, "Template")
        if not template.is_template:
            raise ValidationError(f"Budget {template_id} is not a template.")
        self._drop_site_budgets(site_id)
        budget = self._clone(template, site_id=site_id, name=f"Budget: {template.name}", is_template=False)
        self.commit()
        self.db.refresh(budget)
        return budget

    def _drop_site_budgets(self, site_id: int) -> None:
        stale = select(Budget.id).where(Budget.site_id == site_id, Budget.is_template.is_(False))
        self.db.execute(delete(BudgetItem).where(BudgetItem.budget_id.in_(stale)))
        self.db.execute(delete(Budget).where(Budget.site_id == site_id, Budget.is_template.is_(False)))

    def _clone(self, source: Budget, site_id: int | None, name: str, is_template: bool) -> Budget:
        copy = Budget(site_id=site_id, name=name, bdi=source.bdi, is_template=is_template)
        copy.items = [
            BudgetItem(
                position=item.position,
                wbs=item.wbs,
                code=item.code,
                description=item.description,
                unit=item.unit,
                kind=item.kind,
                quantity=item.quantity,
                unit_cost=item.unit_cost,
                sale_total=item.sale_total,
            )
            for item in source.items
        ]
        self.db.add(copy)
        return copy
