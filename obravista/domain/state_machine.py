"""Canonical state transition helpers for pipeline entities."""

from __future__ import annotations

from collections.abc import Hashable, Iterable


class InvalidTransitionError(ValueError):
    """Raised when a disallowed state transition is attempted."""


class StateMachine:
    """Simple in-memory state machine over a transition table."""

    def __init__(self, transitions: dict[Hashable, set[Hashable]]) -> None:
        self._transitions = transitions

    @classmethod
    def fully_connected(cls, states: Iterable[Hashable]) -> "StateMachine":
        """Build a machine where every state may move to every other state."""
        members = list(states)
        return cls({state: {other for other in members if other != state} for state in members})

    @property
    def states(self) -> set[Hashable]:
        return set(self._transitions)

    def targets(self, current: Hashable) -> set[Hashable]:
        return set(self._transitions.get(current, set()))

    def is_terminal(self, current: Hashable) -> bool:
        return not self._transitions.get(current)

    def can_transition(self, current: Hashable, target: Hashable) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: Hashable, target: Hashable) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {_label(current)} -> {_label(target)}")


def _label(state: Hashable) -> str:
    return str(getattr(state, "value", state))
