"""Tool custody as an append-only event log."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from obravista.core.enums import MovementKind, ToolStatus
from obravista.domain.state_machine import InvalidTransitionError, StateMachine

# Keyed by tool status; values are the custody actions the status accepts.
CUSTODY_ACTIONS = StateMachine(
    {
        ToolStatus.AVAILABLE: {MovementKind.CHECKOUT},
        ToolStatus.IN_USE: {MovementKind.RETURN, MovementKind.TRANSFER},
        ToolStatus.MAINTENANCE: set(),
        ToolStatus.LOST: set(),
    }
)

STATUS_AFTER = {
    MovementKind.CHECKOUT: ToolStatus.IN_USE,
    MovementKind.TRANSFER: ToolStatus.IN_USE,
    MovementKind.RETURN: ToolStatus.AVAILABLE,
}


@dataclass(frozen=True)
class CustodyEvent:
    kind: MovementKind
    occurred_at: datetime
    site_id: int | None = None
    responsible_id: int | None = None
    note: str | None = None


@dataclass(frozen=True)
class Custody:
    """Who holds the tool and where, since when."""

    site_id: int
    responsible_id: int
    since: datetime


def next_status(current: ToolStatus | str, action: MovementKind | str) -> ToolStatus:
    """Validate a custody action against the tool status and return the resulting status."""
    status = ToolStatus(current)
    kind = MovementKind(action)
    if not CUSTODY_ACTIONS.can_transition(status, kind):
        raise InvalidTransitionError(f"Tool in status {status.value} cannot accept {kind.value}.")
    return STATUS_AFTER[kind]


def current_custody(events: Iterable[CustodyEvent]) -> Custody | None:
    """Replay events oldest-first and return the open custody, if any."""
    custody: Custody | None = None
    for event in sorted(events, key=_chronological):
        if event.kind is MovementKind.RETURN:
            custody = None
        elif event.site_id is not None and event.responsible_id is not None:
            custody = Custody(site_id=event.site_id, responsible_id=event.responsible_id, since=event.occurred_at)
    return custody


def history(events: Sequence[CustodyEvent]) -> list[CustodyEvent]:
    """Events newest-first, for display."""
    return sorted(events, key=_chronological, reverse=True)


def _chronological(event: CustodyEvent) -> datetime:
    # SQLite hands back naive UTC timestamps.
    if event.occurred_at.tzinfo is None:
        return event.occurred_at.replace(tzinfo=timezone.utc)
    return event.occurred_at
