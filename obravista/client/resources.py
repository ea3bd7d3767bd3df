"""Typed gateways over :class:`ApiClient`, one per API resource."""

from __future__ import annotations

from datetime import date
from typing import Any

from obravista.client.api_client import ApiClient
from obravista.core.enums import DealStage, InteractionKind, TaskStatus
from obravista.schemas.attendance import AttendanceEntry, AttendanceRecordResponse
from obravista.schemas.budgets import BudgetResponse, ImportSummary
from obravista.schemas.crm import DealResponse, InteractionResponse, ProposalResponse
from obravista.schemas.tasks import (
    AttachmentResponse,
    ChecklistItemResponse,
    LabelResponse,
    PurchaseResponse,
    TaskResponse,
)
from obravista.schemas.tools import MovementResponse, ToolResponse

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _many(schema, data: Any) -> list:
    return [schema.model_validate(item) for item in data or []]


class DealGateway:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def list_deals(self) -> list[DealResponse]:
        return _many(DealResponse, self.api.get("/crm/deals"))

    def change_stage(self, deal_id: int, stage: DealStage) -> DealResponse:
        return DealResponse.model_validate(self.api.patch(f"/crm/deals/{deal_id}/stage", json={"stage": stage.value}))

    def win(self, deal_id: int, start_date: date | None = None) -> DealResponse:
        body = {"start_date": start_date.isoformat() if start_date else None}
        return DealResponse.model_validate(self.api.post(f"/crm/deals/{deal_id}/win", json=body))

    def lose(self, deal_id: int, reason: str) -> DealResponse:
        return DealResponse.model_validate(self.api.post(f"/crm/deals/{deal_id}/lose", json={"reason": reason}))

    def list_interactions(self, deal_id: int) -> list[InteractionResponse]:
        return _many(InteractionResponse, self.api.get(f"/crm/deals/{deal_id}/interactions"))

    def add_interaction(self, deal_id: int, kind: InteractionKind, text: str) -> InteractionResponse:
        data = self.api.post(f"/crm/deals/{deal_id}/interactions", json={"kind": kind.value, "text": text})
        return InteractionResponse.model_validate(data)

    def create_proposal(self, deal_id: int, multiplier: str = "1", value: str | None = None) -> ProposalResponse:
        data = self.api.post(f"/crm/deals/{deal_id}/proposals", json={"multiplier": multiplier, "value": value})
        return ProposalResponse.model_validate(data)


class TaskGateway:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def list_by_site(self, site_id: int) -> list[TaskResponse]:
        return _many(TaskResponse, self.api.get(f"/sites/{site_id}/tasks"))

    def create_task(self, payload: dict[str, Any]) -> TaskResponse:
        return TaskResponse.model_validate(self.api.post("/tasks", json=payload))

    def update_task(self, task_id: int, payload: dict[str, Any]) -> TaskResponse:
        return TaskResponse.model_validate(self.api.put(f"/tasks/{task_id}", json=payload))

    def move(self, task_id: int, status: TaskStatus, index: int) -> list[TaskResponse]:
        data = self.api.patch(f"/tasks/{task_id}/move", json={"status": status.value, "index": index})
        return _many(TaskResponse, data)

    def add_label(self, task_id: int, label_id: int) -> TaskResponse:
        return TaskResponse.model_validate(self.api.post(f"/tasks/{task_id}/labels/{label_id}"))

    def remove_label(self, task_id: int, label_id: int) -> TaskResponse:
        return TaskResponse.model_validate(self.api.delete(f"/tasks/{task_id}/labels/{label_id}"))

    def list_labels(self) -> list[LabelResponse]:
        return _many(LabelResponse, self.api.get("/labels"))

    def delete_label(self, label_id: int) -> None:
        self.api.delete(f"/labels/{label_id}")

    def add_checklist_item(self, task_id: int, title: str) -> ChecklistItemResponse:
        return ChecklistItemResponse.model_validate(self.api.post(f"/tasks/{task_id}/checklist", json={"title": title}))

    def upload_attachment(self, task_id: int, filename: str, content: bytes, mime_type: str) -> AttachmentResponse:
        files = {"file": (filename, content, mime_type)}
        return AttachmentResponse.model_validate(self.api.post(f"/tasks/{task_id}/attachments", files=files))

    def add_purchase(self, task_id: int, material: str, quantity: str, unit: str = "un") -> PurchaseResponse:
        body = {"material": material, "quantity": quantity, "unit": unit}
        return PurchaseResponse.model_validate(self.api.post(f"/tasks/{task_id}/purchases", json=body))


class AttendanceGateway:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def daily_sheet(self, day: date) -> list[AttendanceEntry]:
        return _many(AttendanceEntry, self.api.get("/attendance", params={"date": day.isoformat()}))

    def upsert(self, day: date, contractor_id: int, present: bool, site_id: int | None) -> AttendanceRecordResponse:
        body = {"date": day.isoformat(), "contractor_id": contractor_id, "present": present, "site_id": site_id}
        return AttendanceRecordResponse.model_validate(self.api.post("/attendance", json=body))


class ToolGateway:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def list_tools(self, query: str | None = None) -> list[ToolResponse]:
        params = {"q": query} if query else None
        return _many(ToolResponse, self.api.get("/tools", params=params))

    def checkout(self, tool_id: int, site_id: int, responsible_id: int, note: str | None = None) -> ToolResponse:
        body = {"site_id": site_id, "responsible_id": responsible_id, "note": note}
        return ToolResponse.model_validate(self.api.post(f"/tools/{tool_id}/checkout", json=body))

    def transfer(self, tool_id: int, site_id: int, responsible_id: int, note: str | None = None) -> ToolResponse:
        body = {"site_id": site_id, "responsible_id": responsible_id, "note": note}
        return ToolResponse.model_validate(self.api.post(f"/tools/{tool_id}/transfer", json=body))

    def return_tool(self, tool_id: int, note: str | None = None) -> ToolResponse:
        return ToolResponse.model_validate(self.api.post(f"/tools/{tool_id}/return", json={"note": note}))

    def history(self, tool_id: int) -> list[MovementResponse]:
        return _many(MovementResponse, self.api.get(f"/tools/{tool_id}/history"))


class BudgetGateway:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def site_budget(self, site_id: int) -> BudgetResponse:
        return BudgetResponse.model_validate(self.api.get(f"/sites/{site_id}/budget"))

    def import_workbook(self, site_id: int, filename: str, content: bytes) -> ImportSummary:
        files = {"file": (filename, content, XLSX_MIME)}
        return ImportSummary.model_validate(self.api.post(f"/sites/{site_id}/budget/import", files=files))
