from __future__ import annotations

import pytest

from obravista.core.enums import MovementKind, ToolStatus
from obravista.core.exceptions import NotFoundError, ValidationError
from obravista.domain.state_machine import InvalidTransitionError
from obravista.models import Site
from obravista.schemas.tools import CustodyRequest, ToolCreateRequest, ToolUpdateRequest
from obravista.services.tool_service import ToolService


@pytest.fixture
def drill(session):
    return ToolService(db=session).create_tool(ToolCreateRequest(name="Furadeira", brand="Bosch", code="FUR-01"))


def test_checkout_transfer_return_cycle(session, seed, drill):
    service = ToolService(db=session)
    second_site = Site(name="Galpao Norte", address="Rod. 2, km 5")
    session.add(second_site)
    session.commit()

    tool = service.checkout(drill.id, CustodyRequest(site_id=seed["site"].id, responsible_id=seed["mason"].id))
    assert tool.status == ToolStatus.IN_USE
    assert service.describe(tool).location.site_id == seed["site"].id

    tool = service.transfer(drill.id, CustodyRequest(site_id=second_site.id, responsible_id=seed["mason"].id))
    view = service.describe(tool)
    assert view.status is ToolStatus.IN_USE
    assert view.location.site_id == second_site.id

    tool = service.return_tool(drill.id, note="ok")
    assert tool.status == ToolStatus.AVAILABLE
    assert service.describe(tool).location is None

    kinds = [movement.kind for movement in service.history(drill.id)]
    assert kinds == [MovementKind.RETURN, MovementKind.TRANSFER, MovementKind.CHECKOUT]


def test_custody_actions_follow_status(session, seed, drill):
    service = ToolService(db=session)
    with pytest.raises(InvalidTransitionError):
        service.return_tool(drill.id)
    with pytest.raises(InvalidTransitionError):
        service.transfer(drill.id, CustodyRequest(site_id=seed["site"].id, responsible_id=seed["mason"].id))

    service.update_tool(drill.id, ToolUpdateRequest(status=ToolStatus.MAINTENANCE))
    with pytest.raises(InvalidTransitionError):
        service.checkout(drill.id, CustodyRequest(site_id=seed["site"].id, responsible_id=seed["mason"].id))


def test_checkout_requires_known_site_and_person(session, seed, drill):
    service = ToolService(db=session)
    with pytest.raises(NotFoundError):
        service.checkout(drill.id, CustodyRequest(site_id=999, responsible_id=seed["mason"].id))
    with pytest.raises(NotFoundError):
        service.checkout(drill.id, CustodyRequest(site_id=seed["site"].id, responsible_id=999))
    assert service.history(drill.id) == []


def test_in_use_is_only_reachable_by_checkout(session, seed, drill):
    service = ToolService(db=session)
    with pytest.raises(ValidationError):
        service.create_tool(ToolCreateRequest(name="Serra", status=ToolStatus.IN_USE))
    with pytest.raises(ValidationError):
        service.update_tool(drill.id, ToolUpdateRequest(status=ToolStatus.IN_USE))

    service.checkout(drill.id, CustodyRequest(site_id=seed["site"].id, responsible_id=seed["mason"].id))
    with pytest.raises(ValidationError):
        service.update_tool(drill.id, ToolUpdateRequest(status=ToolStatus.LOST))

    renamed = service.update_tool(drill.id, ToolUpdateRequest(name="Furadeira de impacto"))
    assert renamed.name == "Furadeira de impacto"
    assert renamed.status == ToolStatus.IN_USE


def test_search_and_stats(session, seed, drill):
    service = ToolService(db=session)
    service.create_tool(ToolCreateRequest(name="Betoneira", code="BET-02", status=ToolStatus.MAINTENANCE))
    service.checkout(drill.id, CustodyRequest(site_id=seed["site"].id, responsible_id=seed["mason"].id))

    assert [tool.name for tool in service.list_tools("fur")] == ["Furadeira"]
    assert [tool.name for tool in service.list_tools("BET")] == ["Betoneira"]

    stats = service.stats()
    assert (stats.total, stats.available, stats.in_use, stats.maintenance, stats.lost) == (2, 0, 1, 1, 0)
