"""Tool inventory store: custody actions and movement history."""

from __future__ import annotations

from obravista.client.interaction import Notifier
from obravista.client.resources import ToolGateway
from obravista.core.enums import MovementKind, ToolStatus
from obravista.core.exceptions import ApiFailure, NotFoundError
from obravista.domain.tools import next_status
from obravista.schemas.tools import MovementResponse, ToolResponse


class ToolInventory:
    def __init__(self, gateway: ToolGateway, notifier: Notifier) -> None:
        self.gateway = gateway
        self.notifier = notifier
        self.tools: list[ToolResponse] = []

    def load(self, query: str | None = None) -> list[ToolResponse]:
        try:
            self.tools = self.gateway.list_tools(query)
        except ApiFailure as exc:
            self.notifier.error(f"Could not load tools: {exc}")
        return self.tools

    def get(self, tool_id: int) -> ToolResponse:
        for tool in self.tools:
            if tool.id == tool_id:
                return tool
        raise NotFoundError(f"Tool {tool_id} is not in the inventory list.")

    def by_status(self, status: ToolStatus) -> list[ToolResponse]:
        return [tool for tool in self.tools if tool.status is status]

    def checkout(self, tool_id: int, site_id: int, responsible_id: int, note: str | None = None) -> ToolResponse | None:
        next_status(self.get(tool_id).status, MovementKind.CHECKOUT)
        return self._apply(lambda: self.gateway.checkout(tool_id, site_id, responsible_id, note))

    def transfer(self, tool_id: int, site_id: int, responsible_id: int, note: str | None = None) -> ToolResponse | None:
        next_status(self.get(tool_id).status, MovementKind.TRANSFER)
        return self._apply(lambda: self.gateway.transfer(tool_id, site_id, responsible_id, note))

    def return_tool(self, tool_id: int, note: str | None = None) -> ToolResponse | None:
        next_status(self.get(tool_id).status, MovementKind.RETURN)
        return self._apply(lambda: self.gateway.return_tool(tool_id, note))

    def history(self, tool_id: int) -> list[MovementResponse]:
        try:
            return self.gateway.history(tool_id)
        except ApiFailure as exc:
            self.notifier.error(f"Could not load the history: {exc}")
            return []

    def _apply(self, action) -> ToolResponse | None:
        try:
            updated = action()
        except ApiFailure as exc:
            self.notifier.error(f"Tool action failed: {exc}")
            self.load()
            return None
        self.tools = [updated if tool.id == updated.id else tool for tool in self.tools]
        return updated
