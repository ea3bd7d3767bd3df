"""Tool inventory and custody, backed by an append-only movement log."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, or_, select

from obravista.core.enums import MovementKind, ToolStatus
from obravista.core.exceptions import ValidationError
from obravista.domain.tools import CustodyEvent, current_custody, next_status
from obravista.models import Contractor, Site, Tool, ToolMovement
from obravista.schemas.tools import (
    CustodyRequest,
    ToolCreateRequest,
    ToolLocation,
    ToolResponse,
    ToolStats,
    ToolUpdateRequest,
)
from obravista.services.base_service import BaseService

logger = logging.getLogger(__name__)


def _as_event(movement: ToolMovement) -> CustodyEvent:
    return CustodyEvent(
        kind=MovementKind(movement.kind),
        occurred_at=movement.occurred_at,
        site_id=movement.site_id,
        responsible_id=movement.responsible_id,
        note=movement.note,
    )


class ToolService(BaseService):
    def list_tools(self, query: str | None = None) -> list[Tool]:
        statement = select(Tool).order_by(Tool.name)
        if query:
            pattern = f"%{query.strip()}%"
            statement = statement.where(or_(Tool.name.ilike(pattern), Tool.code.ilike(pattern)))
        return list(self.db.scalars(statement))

    def get_tool(self, tool_id: int) -> Tool:
        return self._require(Tool, tool_id, "Tool")

    def describe(self, tool: Tool) -> ToolResponse:
        """Tool record plus its current custody replayed from the log."""
        custody = current_custody(_as_event(movement) for movement in tool.movements)
        location = (
            ToolLocation(site_id=custody.site_id, responsible_id=custody.responsible_id, checked_out_at=custody.since)
            if custody is not None
            else None
        )
        return ToolResponse(
            id=tool.id,
            name=tool.name,
            brand=tool.brand,
            code=tool.code,
            status=ToolStatus(tool.status),
            location=location,
        )

    def create_tool(self, payload: ToolCreateRequest) -> Tool:
        if payload.status is ToolStatus.IN_USE:
            raise ValidationError("New tools start available; use a checkout to put them in use.")
        tool = Tool(**payload.model_dump())
        self.db.add(tool)
        self.commit()
        self.db.refresh(tool)
        return tool

    def update_tool(self, tool_id: int, payload: ToolUpdateRequest) -> Tool:
        """Edit the tool record. Maintenance and lost statuses are only reachable here."""
        tool = self.get_tool(tool_id)
        changes = payload.model_dump(exclude_unset=True)
        status = changes.get("status")
        if status is not None and status != tool.status:
            if status is ToolStatus.IN_USE:
                raise ValidationError("Use a checkout to put a tool in use.")
            if tool.status == ToolStatus.IN_USE:
                raise ValidationError("Return the tool before changing its status.")
        for field, value in changes.items():
            setattr(tool, field, value)
        self.commit()
        self.db.refresh(tool)
        return tool

    def delete_tool(self, tool_id: int) -> None:
        self.db.delete(self.get_tool(tool_id))
        self.commit()

    def checkout(self, tool_id: int, payload: CustodyRequest) -> Tool:
        return self._record(tool_id, MovementKind.CHECKOUT, payload.site_id, payload.responsible_id, payload.note)

    def transfer(self, tool_id: int, payload: CustodyRequest) -> Tool:
        """Hand a tool in use to another site or person.

        The single transfer event closes the open custody and opens the new one.
        """
        return self._record(tool_id, MovementKind.TRANSFER, payload.site_id, payload.responsible_id, payload.note)

    def return_tool(self, tool_id: int, note: str | None = None) -> Tool:
        return self._record(tool_id, MovementKind.RETURN, None, None, note)

    def history(self, tool_id: int) -> list[ToolMovement]:
        self.get_tool(tool_id)
        query = (
            select(ToolMovement)
            .where(ToolMovement.tool_id == tool_id)
            .order_by(ToolMovement.occurred_at.desc(), ToolMovement.id.desc())
        )
        return list(self.db.scalars(query))

    def stats(self) -> ToolStats:
        counts = dict(self.db.execute(select(Tool.status, func.count(Tool.id)).group_by(Tool.status)).all())
        return ToolStats(
            total=sum(counts.values()),
            available=counts.get(ToolStatus.AVAILABLE, 0),
            in_use=counts.get(ToolStatus.IN_USE, 0),
            maintenance=counts.get(ToolStatus.MAINTENANCE, 0),
            lost=counts.get(ToolStatus.LOST, 0),
        )

    def _record(
        self,
        tool_id: int,
        kind: MovementKind,
        site_id: int | None,
        responsible_id: int | None,
        note: str | None,
    ) -> Tool:
        tool = self.get_tool(tool_id)
        status = next_status(tool.status, kind)
        if site_id is not None:
            self._require(Site, site_id, "Site")
        if responsible_id is not None:
            self._require(Contractor, responsible_id, "Contractor")

        movement = ToolMovement(
            tool_id=tool.id,
            kind=kind,
            site_id=site_id,
            responsible_id=responsible_id,
            note=note,
            occurred_at=datetime.now(timezone.utc),
        )
        self.db.add(movement)
        tool.status = status
        self.commit()
        self.db.refresh(tool)
        logger.info(
            "tools.movement_recorded",
            extra={"event": "tools.movement_recorded", "tool_id": tool.id, "kind": kind.value},
        )
        return tool
