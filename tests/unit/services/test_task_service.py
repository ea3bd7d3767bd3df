from __future__ import annotations

from datetime import date

import pytest

from obravista.core.enums import AssignmentKind, AttachmentCategory, PurchaseStatus, TaskStatus
from obravista.core.exceptions import NotFoundError, ValidationError
from obravista.models import Task
from obravista.schemas.tasks import (
    ChecklistItemCreateRequest,
    ChecklistItemUpdateRequest,
    LabelCreateRequest,
    PurchaseCreateRequest,
    TaskCreateRequest,
    TaskUpdateRequest,
)
from obravista.services.label_service import LabelService
from obravista.services.task_service import TaskService, attachment_category


def _create(service, seed, task_payload, **overrides):
    return service.create_task(TaskCreateRequest(**task_payload(seed["site"].id, seed["crew"].id, **overrides)))


def _columns(tasks):
    return {
        status: [(task.id, task.order) for task in tasks if task.status == status]
        for status in TaskStatus
    }


def test_new_tasks_append_to_their_column(session, seed, task_payload):
    service = TaskService(db=session)
    first = _create(service, seed, task_payload)
    second = _create(service, seed, task_payload, title="Reboco")
    done = _create(service, seed, task_payload, title="Limpeza", status=TaskStatus.DONE)

    assert (first.order, second.order, done.order) == (0, 1, 0)


def test_create_task_checks_site_and_assignee(session, seed, task_payload):
    service = TaskService(db=session)
    with pytest.raises(NotFoundError):
        service.create_task(TaskCreateRequest(**task_payload(999, seed["crew"].id)))
    with pytest.raises(NotFoundError):
        service.create_task(TaskCreateRequest(**task_payload(seed["site"].id, 999)))

    task = service.create_task(
        TaskCreateRequest(
            site_id=seed["site"].id,
            title="Instalar janelas",
            assignment_kind=AssignmentKind.CONTRACTOR,
            contractor_id=seed["mason"].id,
            working_days=[date(2024, 3, 2), date(2024, 3, 1), date(2024, 3, 2)],
        )
    )
    assert task.working_days == ["2024-03-01", "2024-03-02"]


def test_move_task_keeps_one_column_and_unique_order(session, seed, task_payload):
    service = TaskService(db=session)
    a = _create(service, seed, task_payload, title="A")
    b = _create(service, seed, task_payload, title="B")
    c = _create(service, seed, task_payload, title="C", status=TaskStatus.IN_PROGRESS)

    board = service.move_task(a.id, TaskStatus.IN_PROGRESS, 0)

    columns = _columns(board)
    assert columns[TaskStatus.TODO] == [(b.id, 0)]
    assert columns[TaskStatus.IN_PROGRESS] == [(a.id, 0), (c.id, 1)]
    assert session.query(Task).filter_by(id=a.id).one().status == TaskStatus.IN_PROGRESS


def test_status_change_through_update_appends_to_destination(session, seed, task_payload):
    service = TaskService(db=session)
    a = _create(service, seed, task_payload, title="A", status=TaskStatus.DONE)
    b = _create(service, seed, task_payload, title="B")

    payload = TaskUpdateRequest(**task_payload(seed["site"].id, seed["crew"].id, title="B2", status=TaskStatus.DONE))
    updated = service.update_task(b.id, payload)

    assert updated.title == "B2"
    assert (updated.status, updated.order) == (TaskStatus.DONE, a.order + 1)


def test_checklist_crud(session, seed, task_payload):
    service = TaskService(db=session)
    task = _create(service, seed, task_payload)
    item = service.add_checklist_item(task.id, ChecklistItemCreateRequest(title="Comprar cimento"))
    service.add_checklist_item(task.id, ChecklistItemCreateRequest(title="Marcar nivel"))

    done = service.update_checklist_item(item.id, ChecklistItemUpdateRequest(done=True))
    assert done.done is True
    service.delete_checklist_item(item.id)
    assert [entry.title for entry in service.list_checklist(task.id)] == ["Marcar nivel"]


def test_attachment_is_stored_under_upload_dir(session, seed, task_payload, upload_dir):
    service = TaskService(db=session)
    task = _create(service, seed, task_payload)

    attachment = service.add_attachment(task.id, "planta.PDF", b"%PDF-1.4", "application/pdf")
    stored = upload_dir / "tasks" / str(task.id) / attachment.stored_name

    assert stored.read_bytes() == b"%PDF-1.4"
    assert attachment.category == AttachmentCategory.DOCUMENT
    assert attachment.url == f"/uploads/tasks/{task.id}/{attachment.stored_name}"
    assert attachment.stored_name.endswith(".pdf")

    service.delete_attachment(attachment.id)
    assert not stored.exists()


def test_attachment_category_from_mime():
    assert attachment_category("image/jpeg") is AttachmentCategory.PHOTO
    assert attachment_category("video/mp4") is AttachmentCategory.VIDEO
    assert attachment_category(None) is AttachmentCategory.DOCUMENT


def test_label_toggle_roundtrip_on_task(session, seed, task_payload):
    service = TaskService(db=session)
    task = _create(service, seed, task_payload)
    label = LabelService(db=session).create_label(LabelCreateRequest(name="Urgente", color="#ff0000"))

    service.add_label(task.id, label.id)
    service.add_label(task.id, label.id)
    assert [applied.id for applied in service.get_task(task.id).labels] == [label.id]

    service.remove_label(task.id, label.id)
    assert service.get_task(task.id).labels == []
    with pytest.raises(NotFoundError):
        service.remove_label(task.id, label.id)


def test_deleting_catalog_label_removes_it_from_tasks(session, seed, task_payload):
    service = TaskService(db=session)
    labels = LabelService(db=session)
    task = _create(service, seed, task_payload)
    label = labels.create_label(LabelCreateRequest(name="Cliente"))
    service.add_label(task.id, label.id)

    labels.delete_label(label.id)
    session.expire_all()

    assert service.get_task(task.id).labels == []


def test_label_names_are_unique(session):
    labels = LabelService(db=session)
    created = labels.create_label(LabelCreateRequest(name="Eletrica", color="#00aa00"))
    assert created.color == "#00AA00"
    with pytest.raises(ValidationError):
        labels.create_label(LabelCreateRequest(name="eletrica"))


def test_purchase_requests(session, seed, task_payload):
    service = TaskService(db=session)
    task = _create(service, seed, task_payload)
    purchase = service.add_purchase(task.id, PurchaseCreateRequest(material="Cimento CP-II", quantity=10, unit="sc"))
    assert purchase.status == PurchaseStatus.PENDING

    approved = service.set_purchase_status(purchase.id, PurchaseStatus.APPROVED)
    assert approved.status == PurchaseStatus.APPROVED
    service.delete_purchase(purchase.id)
    assert service.list_purchases(task.id) == []


def test_delete_task_cascades_sub_resources(session, seed, task_payload):
    service = TaskService(db=session)
    task = _create(service, seed, task_payload)
    service.add_checklist_item(task.id, ChecklistItemCreateRequest(title="x"))
    service.add_purchase(task.id, PurchaseCreateRequest(material="Areia", quantity=1))

    service.delete_task(task.id)
    with pytest.raises(NotFoundError):
        service.get_task(task.id)
