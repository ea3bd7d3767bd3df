"""Operator interaction seams used by the client stores."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Confirmer(Protocol):
    def confirm(self, message: str) -> bool: ...


class Prompter(Protocol):
    def prompt(self, message: str) -> str | None:
        """Return the entered text, or ``None`` when the operator cancels."""
        ...


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that reports through the application log."""

    def success(self, message: str) -> None:
        logger.info(message, extra={"event": "client.notice"})

    def error(self, message: str) -> None:
        logger.warning(message, extra={"event": "client.error"})
