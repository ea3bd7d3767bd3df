"""Tool inventory endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action
from obravista.database.db import get_db
from obravista.schemas.common import ok, serialize
from obravista.schemas.tools import (
    CustodyRequest,
    MovementResponse,
    ReturnRequest,
    ToolCreateRequest,
    ToolUpdateRequest,
)
from obravista.services.tool_service import ToolService

router = APIRouter(prefix="/tools", tags=["tools"])

PAGE = "ferramentas"
can_read = authorize(PAGE, Action.READ)
can_create = authorize(PAGE, Action.CREATE)
can_edit = authorize(PAGE, Action.EDIT)
can_delete = authorize(PAGE, Action.DELETE)


def _view(service: ToolService, tool) -> dict:
    return service.describe(tool).model_dump(mode="json")


@router.get("", dependencies=[Depends(can_read)])
def list_tools(q: str | None = None, db: Session = Depends(get_db)) -> dict:
    service = ToolService(db)
    return ok([_view(service, tool) for tool in service.list_tools(q)])


@router.get("/stats", dependencies=[Depends(can_read)])
def tool_stats(db: Session = Depends(get_db)) -> dict:
    return ok(ToolService(db).stats().model_dump(mode="json"))


@router.get("/{tool_id}", dependencies=[Depends(can_read)])
def get_tool(tool_id: int, db: Session = Depends(get_db)) -> dict:
    service = ToolService(db)
    return ok(_view(service, service.get_tool(tool_id)))


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(can_create)])
def create_tool(payload: ToolCreateRequest, db: Session = Depends(get_db)) -> dict:
    service = ToolService(db)
    return ok(_view(service, service.create_tool(payload)))


@router.put("/{tool_id}", dependencies=[Depends(can_edit)])
def update_tool(tool_id: int, payload: ToolUpdateRequest, db: Session = Depends(get_db)) -> dict:
    service = ToolService(db)
    return ok(_view(service, service.update_tool(tool_id, payload)))


@router.delete("/{tool_id}", dependencies=[Depends(can_delete)])
def delete_tool(tool_id: int, db: Session = Depends(get_db)) -> dict:
    ToolService(db).delete_tool(tool_id)
    return ok(message="Tool deleted.")


@router.post("/{tool_id}/checkout", dependencies=[Depends(can_edit)])
def checkout_tool(tool_id: int, payload: CustodyRequest, db: Session = Depends(get_db)) -> dict:
    service = ToolService(db)
    return ok(_view(service, service.checkout(tool_id, payload)), message="Tool checked out.")


@router.post("/{tool_id}/transfer", dependencies=[Depends(can_edit)])
def transfer_tool(tool_id: int, payload: CustodyRequest, db: Session = Depends(get_db)) -> dict:
    service = ToolService(db)
    return ok(_view(service, service.transfer(tool_id, payload)), message="Tool transferred.")


@router.post("/{tool_id}/return", dependencies=[Depends(can_edit)])
def return_tool(tool_id: int, payload: ReturnRequest | None = None, db: Session = Depends(get_db)) -> dict:
    service = ToolService(db)
    note = payload.note if payload else None
    return ok(_view(service, service.return_tool(tool_id, note)), message="Tool returned.")


@router.get("/{tool_id}/history", dependencies=[Depends(can_read)])
def tool_history(tool_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(MovementResponse, ToolService(db).history(tool_id)))
