"""Budget endpoints: spreadsheet import and templates."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action
from obravista.core.exceptions import ValidationError
from obravista.database.db import get_db
from obravista.schemas.budgets import BudgetResponse, FromTemplateRequest, TemplateCreateRequest
from obravista.schemas.common import ok, serialize
from obravista.services.budget_service import BudgetService

router = APIRouter(tags=["budgets"])

PAGE = "obras"


@router.get("/sites/{site_id}/budget", dependencies=[Depends(authorize(PAGE, Action.READ))])
def get_site_budget(site_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(BudgetResponse, BudgetService(db).get_site_budget(site_id)))


@router.post("/sites/{site_id}/budget/import", dependencies=[Depends(authorize(PAGE, Action.EDIT))])
async def import_budget(site_id: int, file: UploadFile = File(...), db: Session = Depends(get_db)) -> dict:
    if Path(file.filename or "").suffix.lower() != ".xlsx":
        raise ValidationError("Only .xlsx spreadsheets can be imported.")
    content = await file.read()
    summary = BudgetService(db).import_workbook(site_id, content)
    return ok(summary.model_dump(mode="json"), message="Budget imported.")


@router.get("/budgets/templates", dependencies=[Depends(authorize(PAGE, Action.READ))])
def list_templates(db: Session = Depends(get_db)) -> dict:
    return ok(serialize(BudgetResponse, BudgetService(db).list_templates()))


@router.post(
    "/budgets/templates",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(PAGE, Action.CREATE))],
)
def save_as_template(payload: TemplateCreateRequest, db: Session = Depends(get_db)) -> dict:
    template = BudgetService(db).save_as_template(payload.budget_id, payload.name)
    return ok(serialize(BudgetResponse, template))


@router.post(
    "/budgets/from-template",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(PAGE, Action.EDIT))],
)
def create_from_template(payload: FromTemplateRequest, db: Session = Depends(get_db)) -> dict:
    budget = BudgetService(db).create_from_template(payload.site_id, payload.template_id)
    return ok(serialize(BudgetResponse, budget))
