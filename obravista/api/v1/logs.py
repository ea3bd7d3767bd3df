"""Activity log endpoints for API v1."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action
from obravista.core.enums import LogAction, LogEntity
from obravista.database.db import get_db
from obravista.schemas.activity import ActivityLogResponse, CleanupResult
from obravista.schemas.common import ok, serialize
from obravista.services.activity_service import DEFAULT_LIMIT, ActivityService

router = APIRouter(prefix="/logs", tags=["logs"])

PAGE = "relatorios"


@router.get("", dependencies=[Depends(authorize(PAGE, Action.READ))])
def list_logs(
    user_id: int | None = None,
    task_id: int | None = None,
    entity: LogEntity | None = None,
    action: LogAction | None = None,
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=500),
    db: Session = Depends(get_db),
) -> dict:
    entries = ActivityService(db).list_logs(user_id=user_id, task_id=task_id, entity=entity, action=action, limit=limit)
    return ok(serialize(ActivityLogResponse, entries))


@router.get("/stats", dependencies=[Depends(authorize(PAGE, Action.READ))])
def log_stats(
    user_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    db: Session = Depends(get_db),
) -> dict:
    return ok(ActivityService(db).stats(user_id=user_id, start=start, end=end).model_dump(mode="json"))


@router.delete("/cleanup", dependencies=[Depends(authorize("configuracoes", Action.DELETE))])
def purge_logs(days: int = Query(default=90, ge=1), db: Session = Depends(get_db)) -> dict:
    removed = ActivityService(db).purge_older_than(days)
    return ok(CleanupResult(removed=removed, kept_days=days).model_dump(), message=f"{removed} old log entries removed.")
