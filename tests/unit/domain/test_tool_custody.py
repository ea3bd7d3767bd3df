from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from obravista.core.enums import MovementKind, ToolStatus
from obravista.domain.state_machine import InvalidTransitionError
from obravista.domain.tools import CustodyEvent, current_custody, history, next_status

T0 = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def test_custody_actions_follow_tool_status():
    assert next_status(ToolStatus.AVAILABLE, MovementKind.CHECKOUT) is ToolStatus.IN_USE
    assert next_status(ToolStatus.IN_USE, MovementKind.RETURN) is ToolStatus.AVAILABLE
    assert next_status(ToolStatus.IN_USE, MovementKind.TRANSFER) is ToolStatus.IN_USE


@pytest.mark.parametrize(
    ("status", "action"),
    [
        (ToolStatus.AVAILABLE, MovementKind.RETURN),
        (ToolStatus.AVAILABLE, MovementKind.TRANSFER),
        (ToolStatus.IN_USE, MovementKind.CHECKOUT),
        (ToolStatus.MAINTENANCE, MovementKind.CHECKOUT),
        (ToolStatus.LOST, MovementKind.CHECKOUT),
        (ToolStatus.LOST, MovementKind.RETURN),
    ],
)
def test_illegal_custody_actions_are_rejected(status, action):
    with pytest.raises(InvalidTransitionError):
        next_status(status, action)


def test_replay_derives_current_location():
    events = [
        CustodyEvent(MovementKind.TRANSFER, T0 + timedelta(hours=2), site_id=2, responsible_id=20),
        CustodyEvent(MovementKind.CHECKOUT, T0, site_id=1, responsible_id=10),
    ]
    custody = current_custody(events)
    assert (custody.site_id, custody.responsible_id, custody.since) == (2, 20, T0 + timedelta(hours=2))

    returned = [*events, CustodyEvent(MovementKind.RETURN, T0 + timedelta(hours=5))]
    assert current_custody(returned) is None


def test_replay_tolerates_naive_timestamps_and_history_is_newest_first():
    naive = CustodyEvent(MovementKind.CHECKOUT, datetime(2024, 5, 1, 7, 0), site_id=1, responsible_id=10)
    aware = CustodyEvent(MovementKind.RETURN, T0)
    assert [event.kind for event in history([naive, aware])] == [MovementKind.RETURN, MovementKind.CHECKOUT]
    assert current_custody([aware, naive]) is None
