from __future__ import annotations

import pytest

from obravista.client.tool_inventory import ToolInventory
from obravista.core.enums import ToolStatus
from obravista.core.exceptions import ApiFailure
from obravista.domain.state_machine import InvalidTransitionError
from obravista.schemas.tools import ToolLocation, ToolResponse


class FakeToolGateway:
    def __init__(self):
        self.server = {
            1: ToolResponse(id=1, name="Furadeira", status=ToolStatus.AVAILABLE),
            2: ToolResponse(id=2, name="Betoneira", status=ToolStatus.MAINTENANCE),
        }
        self.calls = []
        self.fail = False

    def list_tools(self, query=None):
        return list(self.server.values())

    def _custody(self, name, tool_id, site_id, responsible_id):
        self.calls.append((name, tool_id, site_id, responsible_id))
        if self.fail:
            raise ApiFailure("conflict", 409)
        location = ToolLocation(site_id=site_id, responsible_id=responsible_id, checked_out_at="2024-03-04T08:00:00Z")
        self.server[tool_id] = self.server[tool_id].model_copy(
            update={"status": ToolStatus.IN_USE, "location": location}
        )
        return self.server[tool_id]

    def checkout(self, tool_id, site_id, responsible_id, note=None):
        return self._custody("checkout", tool_id, site_id, responsible_id)

    def transfer(self, tool_id, site_id, responsible_id, note=None):
        return self._custody("transfer", tool_id, site_id, responsible_id)

    def return_tool(self, tool_id, note=None):
        self.calls.append(("return", tool_id))
        self.server[tool_id] = self.server[tool_id].model_copy(
            update={"status": ToolStatus.AVAILABLE, "location": None}
        )
        return self.server[tool_id]

    def history(self, tool_id):
        raise ApiFailure("not found", 404)


@pytest.fixture
def inventory(notifier):
    store = ToolInventory(FakeToolGateway(), notifier)
    store.load()
    return store


def test_custody_cycle(inventory):
    tool = inventory.checkout(1, site_id=5, responsible_id=8)
    assert tool.location.site_id == 5
    assert [tool.id for tool in inventory.by_status(ToolStatus.IN_USE)] == [1]

    tool = inventory.transfer(1, site_id=6, responsible_id=8)
    assert tool.location.site_id == 6

    tool = inventory.return_tool(1)
    assert tool.status is ToolStatus.AVAILABLE
    assert tool.location is None


def test_actions_are_checked_before_calling(inventory):
    with pytest.raises(InvalidTransitionError):
        inventory.return_tool(1)
    with pytest.raises(InvalidTransitionError):
        inventory.checkout(2, site_id=5, responsible_id=8)
    assert inventory.gateway.calls == []


def test_failure_reloads(inventory, notifier):
    inventory.gateway.fail = True
    assert inventory.checkout(1, site_id=5, responsible_id=8) is None
    assert inventory.get(1).status is ToolStatus.AVAILABLE
    assert notifier.errors == ["Tool action failed: conflict"]


def test_history_failure_is_reported(inventory, notifier):
    assert inventory.history(1) == []
    assert notifier.errors
