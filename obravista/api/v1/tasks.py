"""Kanban endpoints: tasks, checklist, attachments, labels and purchases."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action, PermissionSubject
from obravista.database.db import get_db
from obravista.schemas.common import ok, serialize
from obravista.schemas.tasks import (
    AttachmentResponse,
    ChecklistItemCreateRequest,
    ChecklistItemResponse,
    ChecklistItemUpdateRequest,
    LabelCreateRequest,
    LabelResponse,
    PurchaseCreateRequest,
    PurchaseResponse,
    PurchaseStatusUpdateRequest,
    TaskCreateRequest,
    TaskMoveRequest,
    TaskResponse,
    TaskUpdateRequest,
)
from obravista.services.label_service import LabelService
from obravista.services.task_service import TaskService

router = APIRouter(tags=["kanban"])

PAGE = "kanban"
can_read = authorize(PAGE, Action.READ)
can_create = authorize(PAGE, Action.CREATE)
can_edit = authorize(PAGE, Action.EDIT)
can_delete = authorize(PAGE, Action.DELETE)


@router.get("/sites/{site_id}/tasks", dependencies=[Depends(can_read)])
def list_tasks(site_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(TaskResponse, TaskService(db).list_by_site(site_id)))


@router.get("/tasks/{task_id}", dependencies=[Depends(can_read)])
def get_task(task_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(TaskResponse, TaskService(db).get_task(task_id)))


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreateRequest,
    subject: PermissionSubject = Depends(can_create),
    db: Session = Depends(get_db),
) -> dict:
    return ok(serialize(TaskResponse, TaskService(db).create_task(payload, actor_id=subject.user_id)))


@router.put("/tasks/{task_id}")
def update_task(
    task_id: int,
    payload: TaskUpdateRequest,
    subject: PermissionSubject = Depends(can_edit),
    db: Session = Depends(get_db),
) -> dict:
    task = TaskService(db).update_task(task_id, payload, actor_id=subject.user_id)
    return ok(serialize(TaskResponse, task))


@router.delete("/tasks/{task_id}")
def delete_task(
    task_id: int, subject: PermissionSubject = Depends(can_delete), db: Session = Depends(get_db)
) -> dict:
    TaskService(db).delete_task(task_id, actor_id=subject.user_id)
    return ok(message="Task deleted.")


@router.patch("/tasks/{task_id}/move")
def move_task(
    task_id: int,
    payload: TaskMoveRequest,
    subject: PermissionSubject = Depends(can_edit),
    db: Session = Depends(get_db),
) -> dict:
    board = TaskService(db).move_task(task_id, payload.status, payload.index, actor_id=subject.user_id)
    return ok(serialize(TaskResponse, board))


@router.get("/tasks/{task_id}/checklist", dependencies=[Depends(can_read)])
def list_checklist(task_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(ChecklistItemResponse, TaskService(db).list_checklist(task_id)))


@router.post("/tasks/{task_id}/checklist", status_code=status.HTTP_201_CREATED, dependencies=[Depends(can_create)])
def add_checklist_item(task_id: int, payload: ChecklistItemCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(ChecklistItemResponse, TaskService(db).add_checklist_item(task_id, payload)))


@router.put("/checklist/{item_id}", dependencies=[Depends(can_edit)])
def update_checklist_item(item_id: int, payload: ChecklistItemUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(ChecklistItemResponse, TaskService(db).update_checklist_item(item_id, payload)))


@router.delete("/checklist/{item_id}", dependencies=[Depends(can_delete)])
def delete_checklist_item(item_id: int, db: Session = Depends(get_db)) -> dict:
    TaskService(db).delete_checklist_item(item_id)
    return ok(message="Checklist item deleted.")


@router.get("/tasks/{task_id}/attachments", dependencies=[Depends(can_read)])
def list_attachments(task_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(AttachmentResponse, TaskService(db).list_attachments(task_id)))


@router.post("/tasks/{task_id}/attachments", status_code=status.HTTP_201_CREATED, dependencies=[Depends(can_create)])
async def upload_attachment(task_id: int, file: UploadFile = File(...), db: Session = Depends(get_db)) -> dict:
    content = await file.read()
    attachment = TaskService(db).add_attachment(
        task_id,
        filename=file.filename or "",
        content=content,
        mime_type=file.content_type,
    )
    return ok(serialize(AttachmentResponse, attachment))


@router.delete("/attachments/{attachment_id}", dependencies=[Depends(can_delete)])
def delete_attachment(attachment_id: int, db: Session = Depends(get_db)) -> dict:
    TaskService(db).delete_attachment(attachment_id)
    return ok(message="Attachment deleted.")


@router.post("/tasks/{task_id}/labels/{label_id}", dependencies=[Depends(can_edit)])
def add_task_label(task_id: int, label_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(TaskResponse, TaskService(db).add_label(task_id, label_id)))


@router.delete("/tasks/{task_id}/labels/{label_id}", dependencies=[Depends(can_edit)])
def remove_task_label(task_id: int, label_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(TaskResponse, TaskService(db).remove_label(task_id, label_id)))


@router.get("/tasks/{task_id}/purchases", dependencies=[Depends(can_read)])
def list_purchases(task_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(PurchaseResponse, TaskService(db).list_purchases(task_id)))


@router.post("/tasks/{task_id}/purchases", status_code=status.HTTP_201_CREATED, dependencies=[Depends(can_create)])
def add_purchase(task_id: int, payload: PurchaseCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(PurchaseResponse, TaskService(db).add_purchase(task_id, payload)))


@router.patch("/purchases/{purchase_id}/status", dependencies=[Depends(can_edit)])
def set_purchase_status(purchase_id: int, payload: PurchaseStatusUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(PurchaseResponse, TaskService(db).set_purchase_status(purchase_id, payload.status)))


@router.delete("/purchases/{purchase_id}", dependencies=[Depends(can_delete)])
def delete_purchase(purchase_id: int, db: Session = Depends(get_db)) -> dict:
    TaskService(db).delete_purchase(purchase_id)
    return ok(message="Purchase request deleted.")


@router.get("/labels", dependencies=[Depends(can_read)])
def list_labels(db: Session = Depends(get_db)) -> dict:
    return ok(serialize(LabelResponse, LabelService(db).list_labels()))


@router.post("/labels", status_code=status.HTTP_201_CREATED, dependencies=[Depends(can_create)])
def create_label(payload: LabelCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(LabelResponse, LabelService(db).create_label(payload)))


@router.put("/labels/{label_id}", dependencies=[Depends(can_edit)])
def update_label(label_id: int, payload: LabelCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(LabelResponse, LabelService(db).update_label(label_id, payload)))


@router.delete("/labels/{label_id}", dependencies=[Depends(can_delete)])
def delete_label(label_id: int, db: Session = Depends(get_db)) -> dict:
    LabelService(db).delete_label(label_id)
    return ok(message="Label deleted.")
