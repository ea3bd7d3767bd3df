from __future__ import annotations

from decimal import Decimal

import pytest

from obravista.client.budget_view import IMPORT_CONFIRMATION, BudgetView
from obravista.core.exceptions import ApiFailure, ValidationError
from obravista.schemas.budgets import BudgetResponse, ImportSummary
from obravista.schemas.crm import ProposalResponse


class FakeBudgetGateway:
    def __init__(self, load_error=None):
        self.load_error = load_error
        self.uploads = []

    def site_budget(self, site_id):
        if self.load_error is not None:
            raise self.load_error
        return BudgetResponse(id=4, site_id=site_id, name="Budget imported on 04/03/2024", bdi=Decimal("23.33"))

    def import_workbook(self, site_id, filename, content):
        self.uploads.append((site_id, filename, content))
        return ImportSummary(
            budget_id=4,
            direct_cost=Decimal("1500"),
            sale_total=Decimal("1850"),
            bdi=Decimal("23.33"),
            rows=3,
        )


class FakeDealGateway:
    def create_proposal(self, deal_id, multiplier="1", value=None):
        return ProposalResponse(
            id=1,
            deal_id=deal_id,
            version=2,
            multiplier=Decimal(multiplier),
            value=Decimal("2035.00"),
            validity_days=30,
            pdf_url=f"/propostas/proposta_{deal_id}_v2.pdf",
        )


@pytest.fixture
def workbook(tmp_path):
    path = tmp_path / "orcamento.XLSX"
    path.write_bytes(b"PK fake workbook")
    return path


def test_import_after_confirmation(workbook, notifier, confirmer):
    budgets = FakeBudgetGateway()
    answers = confirmer(False, True)
    view = BudgetView(budgets, FakeDealGateway(), answers, notifier)

    assert view.import_file(1, workbook) is None
    assert budgets.uploads == []

    summary = view.import_file(1, workbook)
    assert summary.rows == 3
    assert answers.asked == [IMPORT_CONFIRMATION, IMPORT_CONFIRMATION]
    assert budgets.uploads == [(1, "orcamento.XLSX", b"PK fake workbook")]
    assert view.budget.id == 4
    assert notifier.successes == ["Budget imported: 3 rows, BDI 23.33%."]


def test_only_xlsx_files(tmp_path, notifier, confirmer):
    answers = confirmer()
    view = BudgetView(FakeBudgetGateway(), FakeDealGateway(), answers, notifier)
    with pytest.raises(ValidationError):
        view.import_file(1, tmp_path / "orcamento.csv")
    assert answers.asked == []


def test_missing_budget_is_not_an_error(notifier, confirmer):
    view = BudgetView(FakeBudgetGateway(ApiFailure("Site 1 has no budget.", 404)), FakeDealGateway(), confirmer(), notifier)
    assert view.load(1) is None
    assert notifier.errors == []

    view = BudgetView(FakeBudgetGateway(ApiFailure("boom", 500)), FakeDealGateway(), confirmer(), notifier)
    assert view.load(1) is None
    assert notifier.errors == ["Could not load the budget: boom"]


def test_proposal_link(notifier, confirmer):
    view = BudgetView(FakeBudgetGateway(), FakeDealGateway(), confirmer(), notifier)
    assert view.proposal_link(9, multiplier="1.1") == "/propostas/proposta_9_v2.pdf"
