"""Kanban task rules: column moves, labels and working days."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from obravista.core.enums import TaskStatus
from obravista.core.exceptions import NotFoundError, ValidationError
from obravista.domain.state_machine import StateMachine
from obravista.schemas.tasks import LabelResponse, TaskResponse

# Columns accept drops from every other column.
TASK_FLOW = StateMachine.fully_connected(TaskStatus)

COLUMN_ORDER = (TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.DONE)

MAX_WORKING_DAY_CANDIDATES = 60


def arrange_columns(tasks: Iterable[TaskResponse]) -> dict[TaskStatus, list[TaskResponse]]:
    """Group tasks by status, each column sorted by its order index."""
    columns: dict[TaskStatus, list[TaskResponse]] = {status: [] for status in COLUMN_ORDER}
    for task in tasks:
        columns[task.status].append(task)
    for cards in columns.values():
        cards.sort(key=lambda card: (card.order, card.id or 0))
    return columns


def move_card(
    tasks: Sequence[TaskResponse],
    task_id: int,
    new_status: TaskStatus | str,
    new_index: int,
) -> list[TaskResponse]:
    """Return a new task list with ``task_id`` placed at ``new_index`` of ``new_status``.

    Source and destination columns are renumbered 0..n-1 so the order index
    stays unique within each column.
    """
    status = TaskStatus(new_status)
    columns = arrange_columns(tasks)
    moving = next((task for task in tasks if task.id == task_id), None)
    if moving is None:
        raise NotFoundError(f"Task {task_id} is not on this board.")
    if moving.status is not status:
        TASK_FLOW.assert_transition(moving.status, status)

    columns[moving.status] = [card for card in columns[moving.status] if card.id != task_id]
    destination = columns[status]
    index = max(0, min(new_index, len(destination)))
    destination.insert(index, moving.model_copy(update={"status": status}))

    result: list[TaskResponse] = []
    for column_status in COLUMN_ORDER:
        for position, card in enumerate(columns[column_status]):
            result.append(card if card.order == position else card.model_copy(update={"order": position}))
    return result


def require_persisted(task: TaskResponse | None) -> int:
    """Return the id of a saved task; sub-resources cannot hang off a draft."""
    if task is None or not task.is_persisted:
        raise ValidationError("Save the task before adding checklist items, attachments, labels or purchases.")
    return task.id


def toggle_label(labels: Sequence[LabelResponse], label: LabelResponse) -> tuple[list[LabelResponse], bool]:
    """Flip membership of ``label``; returns the new set and whether it is now applied."""
    if any(existing.id == label.id for existing in labels):
        return [existing for existing in labels if existing.id != label.id], False
    return [*labels, label], True


def drop_label_everywhere(tasks: Sequence[TaskResponse], label_id: int) -> list[TaskResponse]:
    """Remove a deleted catalog label from every task."""
    updated: list[TaskResponse] = []
    for task in tasks:
        if any(label.id == label_id for label in task.labels):
            task = task.model_copy(update={"labels": [label for label in task.labels if label.id != label_id]})
        updated.append(task)
    return updated


def candidate_working_days(start: date | None, end: date | None) -> list[date]:
    """Every calendar day in [start, end], capped at 60 entries."""
    if start is None or end is None or end < start:
        return []
    span = min((end - start).days + 1, MAX_WORKING_DAY_CANDIDATES)
    return [start + timedelta(days=offset) for offset in range(span)]


def toggle_working_day(selected: Sequence[date], day: date) -> list[date]:
    """Add ``day`` to the explicit working-day list, or remove it if present."""
    if day in selected:
        return [existing for existing in selected if existing != day]
    return sorted([*selected, day])
