"""Per-site kanban board store and the task editor form."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from pydantic import ValidationError as SchemaValidationError

from obravista.client.interaction import Confirmer, Notifier
from obravista.client.resources import TaskGateway
from obravista.core.enums import AssignmentKind, TaskPriority, TaskStatus
from obravista.core.exceptions import ApiFailure, NotFoundError, ValidationError
from obravista.domain.tasks import (
    arrange_columns,
    candidate_working_days,
    drop_label_everywhere,
    move_card,
    require_persisted,
    toggle_label,
    toggle_working_day,
)
from obravista.schemas.tasks import (
    AttachmentResponse,
    ChecklistItemResponse,
    LabelResponse,
    PurchaseResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
)

logger = logging.getLogger(__name__)


@dataclass
class TaskForm:
    """Editable task draft. ``task_id`` stays ``None`` until the first save."""

    site_id: int | None = None
    title: str = ""
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    assignment_kind: AssignmentKind = AssignmentKind.CREW
    crew_id: int | None = None
    contractor_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    working_days: list[date] = field(default_factory=list)
    task_id: int | None = None

    @classmethod
    def from_task(cls, task: TaskResponse) -> "TaskForm":
        return cls(
            site_id=task.site_id,
            title=task.title,
            description=task.description,
            priority=task.priority,
            assignment_kind=task.assignment_kind,
            crew_id=task.crew_id,
            contractor_id=task.contractor_id,
            start_date=task.start_date,
            end_date=task.end_date,
            working_days=list(task.working_days),
            task_id=task.id,
        )

    def candidate_days(self) -> list[date]:
        return candidate_working_days(self.start_date, self.end_date)

    def toggle_day(self, day: date) -> list[date]:
        self.working_days = toggle_working_day(self.working_days, day)
        return self.working_days

    def payload(self) -> dict:
        """Validated JSON body; raises ``ValidationError`` for an incomplete draft."""
        if self.site_id is None:
            raise ValidationError("Select a site for the task.")
        if not self.title.strip():
            raise ValidationError("The task needs a title.")
        fields = {
            "title": self.title.strip(),
            "description": self.description,
            "priority": self.priority,
            "assignment_kind": self.assignment_kind,
            "crew_id": self.crew_id,
            "contractor_id": self.contractor_id,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "working_days": self.working_days,
        }
        try:
            if self.task_id is None:
                request = TaskCreateRequest(site_id=self.site_id, **fields)
            else:
                request = TaskUpdateRequest(**fields)
        except SchemaValidationError as exc:
            raise ValidationError(exc.errors()[0]["msg"]) from exc
        return request.model_dump(mode="json", exclude_none=True)


class KanbanBoard:
    def __init__(self, gateway: TaskGateway, notifier: Notifier, confirmer: Confirmer) -> None:
        self.gateway = gateway
        self.notifier = notifier
        self.confirmer = confirmer
        self.site_id: int | None = None
        self.tasks: list[TaskResponse] = []
        self.labels: list[LabelResponse] = []

    def load(self, site_id: int | None = None) -> list[TaskResponse]:
        if site_id is not None:
            self.site_id = site_id
        if self.site_id is None:
            self.tasks = []
            return self.tasks
        try:
            self.tasks = self.gateway.list_by_site(self.site_id)
            self.labels = self.gateway.list_labels()
        except ApiFailure as exc:
            self.notifier.error(f"Could not load the board: {exc}")
        return self.tasks

    def columns(self) -> dict[TaskStatus, list[TaskResponse]]:
        return arrange_columns(self.tasks)

    def get(self, task_id: int) -> TaskResponse:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(f"Task {task_id} is not on this board.")

    def move(self, task_id: int, new_status: TaskStatus | str, new_index: int) -> list[TaskResponse]:
        status = TaskStatus(new_status)
        self.tasks = move_card(self.tasks, task_id, status, new_index)
        try:
            self.tasks = self.gateway.move(task_id, status, new_index)
        except ApiFailure as exc:
            logger.warning("client.task_move_failed", extra={"event": "client.task_move_failed", "task_id": task_id})
            self.notifier.error(f"Could not move the task: {exc}")
            self.load()
        return self.tasks

    def save(self, form: TaskForm) -> TaskResponse | None:
        payload = form.payload()
        try:
            if form.task_id is None:
                task = self.gateway.create_task(payload)
            else:
                task = self.gateway.update_task(form.task_id, payload)
        except ApiFailure as exc:
            self.notifier.error(f"Could not save the task: {exc}")
            return None
        form.task_id = task.id
        self.load()
        return task

    def toggle_label(self, task: TaskResponse | None, label: LabelResponse) -> TaskResponse:
        task_id = require_persisted(task)
        labels, applied = toggle_label(task.labels, label)
        self._replace(task.model_copy(update={"labels": labels}))
        try:
            if applied:
                updated = self.gateway.add_label(task_id, label.id)
            else:
                updated = self.gateway.remove_label(task_id, label.id)
        except ApiFailure as exc:
            self.notifier.error(f"Could not update labels: {exc}")
            self.load()
            return self.get(task_id)
        self._replace(updated)
        return updated

    def delete_label(self, label_id: int) -> bool:
        """Delete a catalog label and strip it from every task on the board."""
        if not self.confirmer.confirm("Delete this label from the catalog and from every task?"):
            return False
        try:
            self.gateway.delete_label(label_id)
        except ApiFailure as exc:
            self.notifier.error(f"Could not delete the label: {exc}")
            return False
        self.labels = [label for label in self.labels if label.id != label_id]
        self.tasks = drop_label_everywhere(self.tasks, label_id)
        return True

    def add_checklist_item(self, task: TaskResponse | None, title: str) -> ChecklistItemResponse | None:
        task_id = require_persisted(task)
        if not title.strip():
            raise ValidationError("Checklist items need a title.")
        try:
            return self.gateway.add_checklist_item(task_id, title.strip())
        except ApiFailure as exc:
            self.notifier.error(f"Could not add the checklist item: {exc}")
            return None

    def upload_attachment(
        self,
        task: TaskResponse | None,
        filename: str,
        content: bytes,
        mime_type: str,
    ) -> AttachmentResponse | None:
        task_id = require_persisted(task)
        try:
            return self.gateway.upload_attachment(task_id, filename, content, mime_type)
        except ApiFailure as exc:
            self.notifier.error(f"Could not upload {filename}: {exc}")
            return None

    def add_purchase(
        self, task: TaskResponse | None, material: str, quantity: str, unit: str = "un"
    ) -> PurchaseResponse | None:
        task_id = require_persisted(task)
        try:
            return self.gateway.add_purchase(task_id, material, quantity, unit)
        except ApiFailure as exc:
            self.notifier.error(f"Could not request the purchase: {exc}")
            return None

    def _replace(self, task: TaskResponse) -> None:
        self.tasks = [task if existing.id == task.id else existing for existing in self.tasks]
