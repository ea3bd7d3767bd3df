"""Deal pipeline service: stage moves, win/lose and the deal timeline."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select

from obravista.core.config import get_config
from obravista.core.enums import DealStage, InteractionKind, LeadStatus, SiteStatus
from obravista.core.exceptions import ValidationError
from obravista.domain.budget import money, next_version, proposal_value, summarize
from obravista.domain.deals import assert_stage_move, assert_user_interaction, normalize_loss_reason
from obravista.models import Budget, Deal, Interaction, Lead, Proposal, Site, Survey
from obravista.schemas.crm import (
    DealCreateRequest,
    DealUpdateRequest,
    PipelineStats,
    ProposalCreateRequest,
)
from obravista.services.base_service import BaseService

logger = logging.getLogger(__name__)

DEFAULT_SITE_ADDRESS = "A configurar"


class DealService(BaseService):
    """Service for deal CRUD and pipeline transitions."""

    def list_deals(self, stage: DealStage | None = None) -> list[Deal]:
        query = select(Deal).order_by(Deal.updated_at.desc(), Deal.id.desc())
        if stage is not None:
            query = query.where(Deal.stage == stage)
        return list(self.db.scalars(query))

    def get_deal(self, deal_id: int) -> Deal:
        return self._require(Deal, deal_id, "Deal")

    def create_deal(self, payload: DealCreateRequest, user_id: int | None = None) -> Deal:
        self._require(Lead, payload.lead_id, "Lead")
        if payload.stage.is_terminal:
            raise ValidationError("Deals are created in an open stage; use win or lose to close them.")
        if payload.site_id is not None:
            self._require(Site, payload.site_id, "Site")

        deal = Deal(**payload.model_dump())
        self.db.add(deal)
        self.db.flush()
        self._log_system(deal.id, f'Deal created in stage "{payload.stage.value}"', user_id)
        self.commit()
        self.db.refresh(deal)
        logger.info("crm.deal_created", extra={"event": "crm.deal_created", "deal_id": deal.id})
        return deal

    def update_deal(self, deal_id: int, payload: DealUpdateRequest) -> Deal:
        deal = self.get_deal(deal_id)
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("site_id") is not None:
            self._require(Site, changes["site_id"], "Site")
        for field, value in changes.items():
            setattr(deal, field, value)
        self.commit()
        self.db.refresh(deal)
        return deal

    def delete_deal(self, deal_id: int) -> None:
        self.db.delete(self.get_deal(deal_id))
        self.commit()

    def change_stage(self, deal_id: int, target: DealStage, user_id: int | None = None) -> Deal:
        """Move an open deal between open stages.

        Closing a deal goes through :meth:`win` or :meth:`lose`, which carry
        their own side effects.
        """
        deal = self.get_deal(deal_id)
        target = DealStage(target)
        if target.is_terminal:
            raise ValidationError(f"Use the {'win' if target is DealStage.WON else 'lose'} operation to close a deal.")
        if deal.stage == target:
            return deal
        source, _ = assert_stage_move(deal.stage, target)

        deal.stage = target
        self._log_system(deal.id, f'Stage changed from "{source.value}" to "{target.value}"', user_id)
        self.commit()
        self.db.refresh(deal)
        logger.info(
            "crm.deal_stage_changed",
            extra={"event": "crm.deal_stage_changed", "deal_id": deal.id, "from": source.value, "to": target.value},
        )
        return deal

    def win(self, deal_id: int, start_date: date | None = None, user_id: int | None = None) -> Deal:
        """Close a deal as won and turn it into an active site.

        Stage, site provisioning, lead conversion and the timeline entry are
        committed together or not at all.
        """
        deal = self.get_deal(deal_id)
        assert_stage_move(deal.stage, DealStage.WON)
        lead = deal.lead

        try:
            if deal.site is not None:
                site = deal.site
                site.status = SiteStatus.IN_PROGRESS
                site.start_date = start_date or site.start_date or date.today()
            else:
                site = Site(
                    name=deal.title or lead.name,
                    address=lead.address or DEFAULT_SITE_ADDRESS,
                    description=f"Site created from deal #{deal.id}",
                    status=SiteStatus.IN_PROGRESS,
                    start_date=start_date or date.today(),
                    lead_id=lead.id,
                    estimated_budget=deal.estimated_value,
                )
                self.db.add(site)
                self.db.flush()
                deal.site_id = site.id

            deal.stage = DealStage.WON
            deal.loss_reason = None
            lead.status = LeadStatus.CLIENT
            self._log_system(deal.id, "Deal won. Project converted into an active site.", user_id)
            self.commit()
        except Exception:
            self.rollback()
            raise

        self.db.refresh(deal)
        logger.info(
            "crm.deal_won",
            extra={"event": "crm.deal_won", "deal_id": deal.id, "site_id": deal.site_id},
        )
        return deal

    def lose(self, deal_id: int, reason: str | None, user_id: int | None = None) -> Deal:
        cleaned = normalize_loss_reason(reason)
        deal = self.get_deal(deal_id)
        assert_stage_move(deal.stage, DealStage.LOST)

        deal.stage = DealStage.LOST
        deal.loss_reason = cleaned
        self._log_system(deal.id, f"Deal marked as lost. Reason: {cleaned}", user_id)
        self.commit()
        self.db.refresh(deal)
        logger.info("crm.deal_lost", extra={"event": "crm.deal_lost", "deal_id": deal.id})
        return deal

    def list_interactions(self, deal_id: int) -> list[Interaction]:
        self.get_deal(deal_id)
        query = (
            select(Interaction)
            .where(Interaction.deal_id == deal_id)
            .order_by(Interaction.occurred_at.desc(), Interaction.id.desc())
        )
        return list(self.db.scalars(query))

    def add_interaction(
        self,
        deal_id: int,
        kind: InteractionKind | str,
        text: str,
        user_id: int | None = None,
        occurred_at: datetime | None = None,
    ) -> Interaction:
        resolved = assert_user_interaction(kind, text)
        self.get_deal(deal_id)
        interaction = Interaction(
            deal_id=deal_id,
            kind=resolved,
            text=text.strip(),
            user_id=user_id,
            occurred_at=occurred_at or datetime.now(timezone.utc),
        )
        self.db.add(interaction)
        self.commit()
        self.db.refresh(interaction)
        return interaction

    def list_proposals(self, deal_id: int) -> list[Proposal]:
        self.get_deal(deal_id)
        query = select(Proposal).where(Proposal.deal_id == deal_id).order_by(Proposal.version.desc())
        return list(self.db.scalars(query))

    def create_proposal(self, deal_id: int, payload: ProposalCreateRequest) -> Proposal:
        """Register the next proposal version for a deal.

        Without an explicit value the proposal prices the site's budget sale
        total (or the deal estimate when there is no budget) times the margin
        multiplier.
        """
        deal = self.get_deal(deal_id)
        budget = self._site_budget(deal.site_id)
        version = next_version(
            self.db.scalars(select(Proposal.version).where(Proposal.deal_id == deal_id))
        )

        if payload.value is not None:
            value = money(payload.value)
        elif budget is not None and budget.items:
            value = proposal_value(summarize(budget.items).sale_total, payload.multiplier)
        else:
            value = proposal_value(deal.estimated_value, payload.multiplier)

        base_url = get_config().PROPOSAL_BASE_URL
        proposal = Proposal(
            deal_id=deal.id,
            budget_id=budget.id if budget is not None else None,
            version=version,
            multiplier=payload.multiplier,
            value=value,
            notes=payload.notes,
            validity_days=payload.validity_days,
            pdf_url=f"{base_url}/proposta_{deal.id}_v{version}.pdf",
        )
        self.db.add(proposal)
        self.commit()
        self.db.refresh(proposal)
        logger.info(
            "crm.proposal_created",
            extra={"event": "crm.proposal_created", "deal_id": deal.id, "version": version},
        )
        return proposal

    def get_survey(self, deal_id: int) -> Survey | None:
        self.get_deal(deal_id)
        return self.db.scalars(select(Survey).where(Survey.deal_id == deal_id)).first()

    def upsert_survey(self, deal_id: int, answers: dict[str, Any], user_id: int | None = None) -> Survey:
        survey = self.get_survey(deal_id)
        if survey is None:
            survey = Survey(deal_id=deal_id, answers=dict(answers))
            self.db.add(survey)
        else:
            survey.answers = dict(answers)
        self._log_system(deal_id, "Site survey filled in or updated.", user_id)
        self.commit()
        self.db.refresh(survey)
        return survey

    def pipeline_stats(self) -> PipelineStats:
        counts = dict(self.db.execute(select(Deal.stage, func.count(Deal.id)).group_by(Deal.stage)).all())
        open_value = self.db.scalar(
            select(func.coalesce(func.sum(Deal.estimated_value), 0)).where(
                Deal.stage.not_in([DealStage.WON, DealStage.LOST])
            )
        )
        won = counts.get(DealStage.WON, 0)
        lost = counts.get(DealStage.LOST, 0)
        closed = won + lost
        return PipelineStats(
            total=sum(counts.values()),
            won=won,
            lost=lost,
            open_value=money(Decimal(str(open_value or 0))),
            conversion_rate=round(won / closed * 100, 2) if closed else 0.0,
        )

    def _site_budget(self, site_id: int | None) -> Budget | None:
        if site_id is None:
            return None
        query = (
            select(Budget)
            .where(Budget.site_id == site_id, Budget.is_template.is_(False))
            .order_by(Budget.id.desc())
        )
        return self.db.scalars(query).first()

    def _log_system(self, deal_id: int, text: str, user_id: int | None) -> None:
        self.db.add(
            Interaction(
                deal_id=deal_id,
                kind=InteractionKind.SYSTEM,
                text=text,
                user_id=user_id,
                occurred_at=datetime.now(timezone.utc),
            )
        )
