from __future__ import annotations

import pytest


class RecordingNotifier:
    def __init__(self):
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class ScriptedConfirmer:
    """Answers confirmations from a fixed script and remembers the questions."""

    def __init__(self, *answers: bool):
        self.answers = list(answers)
        self.asked: list[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self.answers.pop(0) if self.answers else True


class ScriptedPrompter:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked: list[str] = []

    def prompt(self, message: str):
        self.asked.append(message)
        return self.answers.pop(0) if self.answers else None


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def confirmer():
    return ScriptedConfirmer


@pytest.fixture
def prompter():
    return ScriptedPrompter
