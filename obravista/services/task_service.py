"""Kanban task service with checklist, attachment, label and purchase sub-resources."""

from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Any

from sqlalchemy import func, select, update

from obravista.core.config import get_config
from obravista.core.enums import AssignmentKind, AttachmentCategory, LogAction, PurchaseStatus, TaskStatus
from obravista.core.exceptions import NotFoundError, ValidationError
from obravista.domain.tasks import move_card
from obravista.models import (
    ActivityLog,
    Attachment,
    ChecklistItem,
    Contractor,
    Crew,
    Label,
    PurchaseRequest,
    Site,
    Task,
)
from obravista.schemas.tasks import (
    ChecklistItemCreateRequest,
    ChecklistItemUpdateRequest,
    PurchaseCreateRequest,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
)
from obravista.services.activity_service import record_activity
from obravista.services.base_service import BaseService

logger = logging.getLogger(__name__)


def attachment_category(mime_type: str | None) -> AttachmentCategory:
    if mime_type and mime_type.startswith("image/"):
        return AttachmentCategory.PHOTO
    if mime_type and mime_type.startswith("video/"):
        return AttachmentCategory.VIDEO
    return AttachmentCategory.DOCUMENT


class TaskService(BaseService):
    """Service for Kanban tasks and their column order."""

    def list_by_site(self, site_id: int) -> list[Task]:
        self._require(Site, site_id, "Site")
        query = select(Task).where(Task.site_id == site_id).order_by(Task.status, Task.order, Task.id)
        return list(self.db.scalars(query))

    def get_task(self, task_id: int) -> Task:
        return self._require(Task, task_id, "Task")

    def create_task(self, payload: TaskCreateRequest, actor_id: int | None = None) -> Task:
        self._require(Site, payload.site_id, "Site")
        self._check_assignee(payload.assignment_kind, payload.crew_id, payload.contractor_id)

        data = payload.model_dump(exclude={"working_days"})
        task = Task(
            **data,
            working_days=[day.isoformat() for day in sorted(set(payload.working_days))],
            order=self._next_order(payload.site_id, payload.status),
        )
        self.db.add(task)
        self.db.flush()
        record_activity(
            self.db,
            LogAction.CREATED,
            actor_id=actor_id,
            task_id=task.id,
            details={"title": task.title, "status": TaskStatus(task.status).value},
        )
        self.commit()
        self.db.refresh(task)
        logger.info("kanban.task_created", extra={"event": "kanban.task_created", "task_id": task.id})
        return task

    def update_task(self, task_id: int, payload: TaskUpdateRequest, actor_id: int | None = None) -> Task:
        """Update task fields; a status change appends the card to the end of its new column."""
        task = self.get_task(task_id)
        self._check_assignee(payload.assignment_kind, payload.crew_id, payload.contractor_id)

        changes = payload.model_dump(exclude_unset=True, exclude={"working_days", "status"})
        for field, value in changes.items():
            setattr(task, field, value)
        # The validator enforces exactly one assignee; clear the other side explicitly.
        task.crew_id = payload.crew_id
        task.contractor_id = payload.contractor_id
        if "working_days" in payload.model_fields_set:
            task.working_days = [day.isoformat() for day in sorted(set(payload.working_days))]

        if payload.status is not None and payload.status != task.status:
            task.order = self._next_order(task.site_id, payload.status)
            task.status = payload.status

        record_activity(
            self.db,
            LogAction.UPDATED,
            actor_id=actor_id,
            task_id=task.id,
            details={"title": task.title, "changes": payload.model_dump(mode="json", exclude_unset=True)},
        )
        self.commit()
        self.db.refresh(task)
        return task

    def delete_task(self, task_id: int, actor_id: int | None = None) -> None:
        task = self.get_task(task_id)
        site = self.db.get(Site, task.site_id)
        # Child rows may have changed through this session since the collections loaded.
        self.db.expire(task, ["checklist", "attachments", "purchases", "labels"])
        paths = [self._stored_path(attachment) for attachment in task.attachments]
        self.db.execute(update(ActivityLog).where(ActivityLog.task_id == task.id).values(task_id=None))
        record_activity(
            self.db,
            LogAction.DELETED,
            actor_id=actor_id,
            task_id=None,
            details={"title": task.title, "site": site.name if site else None},
        )
        self.db.delete(task)
        self.commit()
        for path in paths:
            path.unlink(missing_ok=True)

    def move_task(self, task_id: int, status: TaskStatus, index: int, actor_id: int | None = None) -> list[Task]:
        """Place a task at ``index`` of ``status`` and renumber the affected columns.

        Returns the site's tasks in server-confirmed order.
        """
        task = self.get_task(task_id)
        siblings = self.list_by_site(task.site_id)
        snapshot = [TaskResponse.model_validate(sibling) for sibling in siblings]
        arranged = move_card(snapshot, task_id=task_id, new_status=status, new_index=index)

        previous = TaskStatus(task.status)
        by_id = {sibling.id: sibling for sibling in siblings}
        for card in arranged:
            row = by_id[card.id]
            if row.status != card.status:
                row.status = card.status
            if row.order != card.order:
                row.order = card.order
        record_activity(
            self.db,
            LogAction.MOVED,
            actor_id=actor_id,
            task_id=task.id,
            details={"title": task.title, "from": previous.value, "to": TaskStatus(status).value, "index": index},
        )
        self.commit()
        logger.info(
            "kanban.task_moved",
            extra={"event": "kanban.task_moved", "task_id": task_id, "status": TaskStatus(status).value, "index": index},
        )
        return self.list_by_site(task.site_id)

    # Checklist

    def list_checklist(self, task_id: int) -> list[ChecklistItem]:
        self.get_task(task_id)
        query = select(ChecklistItem).where(ChecklistItem.task_id == task_id)
        return list(self.db.scalars(query.order_by(ChecklistItem.order, ChecklistItem.id)))

    def add_checklist_item(self, task_id: int, payload: ChecklistItemCreateRequest) -> ChecklistItem:
        task = self.get_task(task_id)
        order = payload.order
        if order is None:
            order = self.db.scalar(select(func.count(ChecklistItem.id)).where(ChecklistItem.task_id == task.id))
        item = ChecklistItem(task_id=task.id, title=payload.title, order=order)
        self.db.add(item)
        self.commit()
        self.db.refresh(item)
        return item

    def update_checklist_item(self, item_id: int, payload: ChecklistItemUpdateRequest) -> ChecklistItem:
        item = self._require(ChecklistItem, item_id, "Checklist item")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(item, field, value)
        self.commit()
        self.db.refresh(item)
        return item

    def delete_checklist_item(self, item_id: int) -> None:
        self.db.delete(self._require(ChecklistItem, item_id, "Checklist item"))
        self.commit()

    # Attachments

    def list_attachments(self, task_id: int) -> list[Attachment]:
        self.get_task(task_id)
        query = select(Attachment).where(Attachment.task_id == task_id).order_by(Attachment.id)
        return list(self.db.scalars(query))

    def add_attachment(self, task_id: int, filename: str, content: bytes, mime_type: str | None = None) -> Attachment:
        task = self.get_task(task_id)
        if not filename:
            raise ValidationError("Attachment file name is required.")
        mime = mime_type or mimetypes.guess_type(filename)[0]
        stored_name = f"{uuid.uuid4().hex}{Path(filename).suffix.lower()}"

        target_dir = Path(get_config().UPLOAD_DIR) / "tasks" / str(task.id)
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / stored_name).write_bytes(content)

        attachment = Attachment(
            task_id=task.id,
            filename=Path(filename).name,
            stored_name=stored_name,
            mime_type=mime,
            category=attachment_category(mime),
            size=len(content),
            url=f"/uploads/tasks/{task.id}/{stored_name}",
        )
        self.db.add(attachment)
        self.commit()
        self.db.refresh(attachment)
        logger.info(
            "kanban.attachment_stored",
            extra={"event": "kanban.attachment_stored", "task_id": task.id, "size": len(content)},
        )
        return attachment

    def delete_attachment(self, attachment_id: int) -> None:
        attachment = self._require(Attachment, attachment_id, "Attachment")
        path = self._stored_path(attachment)
        self.db.delete(attachment)
        self.commit()
        path.unlink(missing_ok=True)

    # Labels

    def add_label(self, task_id: int, label_id: int) -> Task:
        """Apply a catalog label; applying one already present changes nothing."""
        task = self.get_task(task_id)
        label = self._require(Label, label_id, "Label")
        if label not in task.labels:
            task.labels.append(label)
            self.commit()
            self.db.refresh(task)
        return task

    def remove_label(self, task_id: int, label_id: int) -> Task:
        task = self.get_task(task_id)
        label = next((existing for existing in task.labels if existing.id == label_id), None)
        if label is None:
            raise NotFoundError(f"Label {label_id} is not applied to task {task_id}.")
        task.labels.remove(label)
        self.commit()
        self.db.refresh(task)
        return task

    # Purchases

    def list_purchases(self, task_id: int) -> list[PurchaseRequest]:
        self.get_task(task_id)
        query = select(PurchaseRequest).where(PurchaseRequest.task_id == task_id).order_by(PurchaseRequest.id)
        return list(self.db.scalars(query))

    def add_purchase(self, task_id: int, payload: PurchaseCreateRequest) -> PurchaseRequest:
        task = self.get_task(task_id)
        purchase = PurchaseRequest(task_id=task.id, **payload.model_dump())
        self.db.add(purchase)
        self.commit()
        self.db.refresh(purchase)
        return purchase

    def set_purchase_status(self, purchase_id: int, status: PurchaseStatus) -> PurchaseRequest:
        purchase = self._require(PurchaseRequest, purchase_id, "Purchase request")
        purchase.status = status
        self.commit()
        self.db.refresh(purchase)
        return purchase

    def delete_purchase(self, purchase_id: int) -> None:
        self.db.delete(self._require(PurchaseRequest, purchase_id, "Purchase request"))
        self.commit()

    def _next_order(self, site_id: int, status: TaskStatus) -> int:
        current: Any = self.db.scalar(
            select(func.max(Task.order)).where(Task.site_id == site_id, Task.status == status)
        )
        return 0 if current is None else int(current) + 1

    def _check_assignee(self, kind: AssignmentKind, crew_id: int | None, contractor_id: int | None) -> None:
        if kind is AssignmentKind.CREW:
            self._require(Crew, crew_id, "Crew")
        else:
            self._require(Contractor, contractor_id, "Contractor")

    @staticmethod
    def _stored_path(attachment: Attachment) -> Path:
        return Path(get_config().UPLOAD_DIR) / "tasks" / str(attachment.task_id) / attachment.stored_name
