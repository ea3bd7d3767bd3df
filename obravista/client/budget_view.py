"""Site budget import and proposal links."""

from __future__ import annotations

from pathlib import Path

from obravista.client.interaction import Confirmer, Notifier
from obravista.client.resources import BudgetGateway, DealGateway
from obravista.core.exceptions import ApiFailure, ValidationError
from obravista.schemas.budgets import BudgetResponse, ImportSummary

IMPORT_CONFIRMATION = "Importing replaces the whole budget of this site. Continue?"


class BudgetView:
    def __init__(
        self,
        budgets: BudgetGateway,
        deals: DealGateway,
        confirmer: Confirmer,
        notifier: Notifier,
    ) -> None:
        self.budgets = budgets
        self.deals = deals
        self.confirmer = confirmer
        self.notifier = notifier
        self.budget: BudgetResponse | None = None

    def load(self, site_id: int) -> BudgetResponse | None:
        try:
            self.budget = self.budgets.site_budget(site_id)
        except ApiFailure as exc:
            self.budget = None
            if exc.status_code != 404:
                self.notifier.error(f"Could not load the budget: {exc}")
        return self.budget

    def import_file(self, site_id: int, path: str | Path) -> ImportSummary | None:
        """Upload an .xlsx budget after confirmation; returns ``None`` when cancelled or failed."""
        source = Path(path)
        if source.suffix.lower() != ".xlsx":
            raise ValidationError("Only .xlsx spreadsheets can be imported.")
        if not self.confirmer.confirm(IMPORT_CONFIRMATION):
            return None
        try:
            summary = self.budgets.import_workbook(site_id, source.name, source.read_bytes())
        except ApiFailure as exc:
            self.notifier.error(f"Import failed: {exc}")
            return None
        self.notifier.success(f"Budget imported: {summary.rows} rows, BDI {summary.bdi}%.")
        self.load(site_id)
        return summary

    def proposal_link(self, deal_id: int, multiplier: str = "1") -> str | None:
        """Generate a new proposal version and return its PDF link."""
        try:
            proposal = self.deals.create_proposal(deal_id, multiplier=multiplier)
        except ApiFailure as exc:
            self.notifier.error(f"Could not generate the proposal: {exc}")
            return None
        return proposal.pdf_url
