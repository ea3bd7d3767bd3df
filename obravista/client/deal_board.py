"""Sales pipeline board with optimistic stage moves."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from obravista.client.interaction import Confirmer, Notifier, Prompter
from obravista.client.resources import DealGateway
from obravista.core.enums import DealStage, InteractionKind
from obravista.core.exceptions import ApiFailure, NotFoundError
from obravista.domain.deals import PIPELINE_STAGES, assert_stage_move, assert_user_interaction, normalize_loss_reason
from obravista.schemas.crm import DealResponse, InteractionResponse

logger = logging.getLogger(__name__)

WIN_CONFIRMATION = "Close this deal as WON? An active site will be created automatically."
LOSS_PROMPT = "Reason for losing the deal:"


class DealBoard:
    """In-memory pipeline; moves apply locally first and reconcile by reloading."""

    def __init__(
        self,
        gateway: DealGateway,
        confirmer: Confirmer,
        prompter: Prompter,
        notifier: Notifier,
        on_stats_changed: Callable[[], None] | None = None,
    ) -> None:
        self.gateway = gateway
        self.confirmer = confirmer
        self.prompter = prompter
        self.notifier = notifier
        self.on_stats_changed = on_stats_changed
        self.deals: list[DealResponse] = []

    def load(self) -> list[DealResponse]:
        try:
            self.deals = self.gateway.list_deals()
        except ApiFailure as exc:
            self.notifier.error(f"Could not load deals: {exc}")
        return self.deals

    def column(self, stage: DealStage) -> list[DealResponse]:
        return [deal for deal in self.deals if deal.stage is stage]

    def columns(self) -> dict[DealStage, list[DealResponse]]:
        return {stage: self.column(stage) for stage in PIPELINE_STAGES}

    def get(self, deal_id: int) -> DealResponse:
        for deal in self.deals:
            if deal.id == deal_id:
                return deal
        raise NotFoundError(f"Deal {deal_id} is not on the board.")

    def move_stage(self, deal_id: int, target: DealStage | str, start_date: date | None = None) -> bool:
        """Move a deal; returns False when the operator cancels.

        Raises ``InvalidTransitionError`` for moves out of won/lost and
        ``ValidationError`` for a blank loss reason, before any API call.
        """
        deal = self.get(deal_id)
        if DealStage(target) is deal.stage:
            return True
        _, destination = assert_stage_move(deal.stage, target)

        snapshot = list(self.deals)
        self._set_stage(deal_id, destination)

        reason: str | None = None
        if destination is DealStage.WON and not self.confirmer.confirm(WIN_CONFIRMATION):
            self.deals = snapshot
            return False
        if destination is DealStage.LOST:
            entered = self.prompter.prompt(LOSS_PROMPT)
            if entered is None:
                self.deals = snapshot
                return False
            try:
                reason = normalize_loss_reason(entered)
            except ValueError:
                self.deals = snapshot
                raise

        try:
            if destination is DealStage.WON:
                self.gateway.win(deal_id, start_date=start_date)
                self.notifier.success("Deal won.")
            elif destination is DealStage.LOST:
                self.gateway.lose(deal_id, reason)
                self.notifier.success("Deal marked as lost.")
            else:
                self.gateway.change_stage(deal_id, destination)
        except ApiFailure as exc:
            logger.warning(
                "client.deal_move_failed",
                extra={"event": "client.deal_move_failed", "deal_id": deal_id, "target": destination.value},
            )
            self.notifier.error(f"Could not update the stage: {exc}")
            self.load()
            return False

        if self.on_stats_changed is not None:
            self.on_stats_changed()
        self.load()
        return True

    def record_interaction(self, deal_id: int, kind: InteractionKind | str, text: str) -> InteractionResponse | None:
        resolved = assert_user_interaction(kind, text)
        try:
            return self.gateway.add_interaction(deal_id, resolved, text.strip())
        except ApiFailure as exc:
            self.notifier.error(f"Could not save the interaction: {exc}")
            return None

    def _set_stage(self, deal_id: int, stage: DealStage) -> None:
        self.deals = [deal.model_copy(update={"stage": stage}) if deal.id == deal_id else deal for deal in self.deals]
