"""CRM endpoints: leads, deals, timeline, proposals and site surveys."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action, PermissionSubject
from obravista.core.enums import DealStage
from obravista.database.db import get_db
from obravista.schemas.common import ok, serialize
from obravista.schemas.crm import (
    DealCreateRequest,
    DealLoseRequest,
    DealResponse,
    DealStageUpdateRequest,
    DealUpdateRequest,
    DealWinRequest,
    InteractionCreateRequest,
    InteractionResponse,
    LeadCreateRequest,
    LeadResponse,
    LeadUpdateRequest,
    ProposalCreateRequest,
    ProposalResponse,
    SurveyResponse,
    SurveyUpsertRequest,
)
from obravista.services.deal_service import DealService
from obravista.services.lead_service import LeadService

router = APIRouter(prefix="/crm", tags=["crm"])

PAGE = "crm"
can_read = authorize(PAGE, Action.READ)
can_create = authorize(PAGE, Action.CREATE)
can_edit = authorize(PAGE, Action.EDIT)
can_delete = authorize(PAGE, Action.DELETE)


@router.get("/leads", dependencies=[Depends(can_read)])
def list_leads(db: Session = Depends(get_db)) -> dict:
    return ok(serialize(LeadResponse, LeadService(db).list_leads()))


@router.get("/leads/{lead_id}", dependencies=[Depends(can_read)])
def get_lead(lead_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(LeadResponse, LeadService(db).get_lead(lead_id)))


@router.post("/leads", status_code=status.HTTP_201_CREATED, dependencies=[Depends(can_create)])
def create_lead(payload: LeadCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(LeadResponse, LeadService(db).create_lead(payload)))


@router.put("/leads/{lead_id}", dependencies=[Depends(can_edit)])
def update_lead(lead_id: int, payload: LeadUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(LeadResponse, LeadService(db).update_lead(lead_id, payload)))


@router.delete("/leads/{lead_id}", dependencies=[Depends(can_delete)])
def delete_lead(lead_id: int, db: Session = Depends(get_db)) -> dict:
    LeadService(db).delete_lead(lead_id)
    return ok(message="Lead deleted.")


@router.get("/deals", dependencies=[Depends(can_read)])
def list_deals(stage: DealStage | None = None, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(DealResponse, DealService(db).list_deals(stage)))


@router.get("/deals/stats", dependencies=[Depends(can_read)])
def pipeline_stats(db: Session = Depends(get_db)) -> dict:
    return ok(DealService(db).pipeline_stats().model_dump(mode="json"))


@router.get("/deals/{deal_id}", dependencies=[Depends(can_read)])
def get_deal(deal_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(DealResponse, DealService(db).get_deal(deal_id)))


@router.post("/deals", status_code=status.HTTP_201_CREATED)
def create_deal(
    payload: DealCreateRequest,
    db: Session = Depends(get_db),
    user: PermissionSubject = Depends(can_create),
) -> dict:
    return ok(serialize(DealResponse, DealService(db).create_deal(payload, user_id=user.user_id)))


@router.put("/deals/{deal_id}", dependencies=[Depends(can_edit)])
def update_deal(deal_id: int, payload: DealUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(DealResponse, DealService(db).update_deal(deal_id, payload)))


@router.delete("/deals/{deal_id}", dependencies=[Depends(can_delete)])
def delete_deal(deal_id: int, db: Session = Depends(get_db)) -> dict:
    DealService(db).delete_deal(deal_id)
    return ok(message="Deal deleted.")


@router.patch("/deals/{deal_id}/stage")
def change_stage(
    deal_id: int,
    payload: DealStageUpdateRequest,
    db: Session = Depends(get_db),
    user: PermissionSubject = Depends(can_edit),
) -> dict:
    deal = DealService(db).change_stage(deal_id, payload.stage, user_id=user.user_id)
    return ok(serialize(DealResponse, deal))


@router.post("/deals/{deal_id}/win")
def win_deal(
    deal_id: int,
    payload: DealWinRequest,
    db: Session = Depends(get_db),
    user: PermissionSubject = Depends(can_edit),
) -> dict:
    deal = DealService(db).win(deal_id, start_date=payload.start_date, user_id=user.user_id)
    return ok(serialize(DealResponse, deal), message="Deal won. It is now an active site.")


@router.post("/deals/{deal_id}/lose")
def lose_deal(
    deal_id: int,
    payload: DealLoseRequest,
    db: Session = Depends(get_db),
    user: PermissionSubject = Depends(can_edit),
) -> dict:
    deal = DealService(db).lose(deal_id, payload.reason, user_id=user.user_id)
    return ok(serialize(DealResponse, deal), message="Deal marked as lost.")


@router.get("/deals/{deal_id}/interactions", dependencies=[Depends(can_read)])
def list_interactions(deal_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(InteractionResponse, DealService(db).list_interactions(deal_id)))


@router.post("/deals/{deal_id}/interactions", status_code=status.HTTP_201_CREATED)
def add_interaction(
    deal_id: int,
    payload: InteractionCreateRequest,
    db: Session = Depends(get_db),
    user: PermissionSubject = Depends(can_create),
) -> dict:
    interaction = DealService(db).add_interaction(
        deal_id,
        kind=payload.kind,
        text=payload.text,
        user_id=user.user_id,
        occurred_at=payload.occurred_at,
    )
    return ok(serialize(InteractionResponse, interaction))


@router.get("/deals/{deal_id}/proposals", dependencies=[Depends(can_read)])
def list_proposals(deal_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(ProposalResponse, DealService(db).list_proposals(deal_id)))


@router.post("/deals/{deal_id}/proposals", status_code=status.HTTP_201_CREATED, dependencies=[Depends(can_create)])
def create_proposal(deal_id: int, payload: ProposalCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(ProposalResponse, DealService(db).create_proposal(deal_id, payload)))


@router.get("/deals/{deal_id}/survey", dependencies=[Depends(can_read)])
def get_survey(deal_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(SurveyResponse, DealService(db).get_survey(deal_id)))


@router.put("/deals/{deal_id}/survey")
def upsert_survey(
    deal_id: int,
    payload: SurveyUpsertRequest,
    db: Session = Depends(get_db),
    user: PermissionSubject = Depends(can_edit),
) -> dict:
    survey = DealService(db).upsert_survey(deal_id, payload.answers, user_id=user.user_id)
    return ok(serialize(SurveyResponse, survey))
