"""Construction site endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action
from obravista.core.enums import SiteStatus
from obravista.database.db import get_db
from obravista.schemas.common import ok, serialize
from obravista.schemas.sites import SiteCreateRequest, SiteResponse, SiteUpdateRequest
from obravista.services.site_service import SiteService

router = APIRouter(prefix="/sites", tags=["sites"])

PAGE = "obras"


@router.get("", dependencies=[Depends(authorize(PAGE, Action.READ))])
def list_sites(
    status_filter: SiteStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
) -> dict:
    return ok(serialize(SiteResponse, SiteService(db).list_sites(status_filter)))


@router.get("/{site_id}", dependencies=[Depends(authorize(PAGE, Action.READ))])
def get_site(site_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(SiteResponse, SiteService(db).get_site(site_id)))


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(authorize(PAGE, Action.CREATE))])
def create_site(payload: SiteCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(SiteResponse, SiteService(db).create_site(payload)))


@router.put("/{site_id}", dependencies=[Depends(authorize(PAGE, Action.EDIT))])
def update_site(site_id: int, payload: SiteUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(SiteResponse, SiteService(db).update_site(site_id, payload)))
