"""Kanban task schemas and their sub-resources."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from obravista.core.enums import (
    AssignmentKind,
    AttachmentCategory,
    PurchaseStatus,
    TaskPriority,
    TaskStatus,
)


class LabelCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=60)
    color: str = Field(default="#3B82F6", pattern=r"^#[0-9A-Fa-f]{6}$")


class LabelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str


class TaskBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    priority: TaskPriority = TaskPriority.MEDIUM
    assignment_kind: AssignmentKind = AssignmentKind.CREW
    crew_id: int | None = Field(default=None, ge=1)
    contractor_id: int | None = Field(default=None, ge=1)
    start_date: date | None = None
    end_date: date | None = None
    working_days: list[date] = Field(default_factory=list)

    @model_validator(mode="after")
    def _exactly_one_assignee(self) -> "TaskBase":
        if self.assignment_kind is AssignmentKind.CREW:
            if self.crew_id is None or self.contractor_id is not None:
                raise ValueError("crew assignment requires crew_id and no contractor_id")
        elif self.contractor_id is None or self.crew_id is not None:
            raise ValueError("contractor assignment requires contractor_id and no crew_id")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self


class TaskCreateRequest(TaskBase):
    site_id: int = Field(ge=1)
    status: TaskStatus = TaskStatus.TODO


class TaskUpdateRequest(TaskBase):
    status: TaskStatus | None = None


class TaskMoveRequest(BaseModel):
    status: TaskStatus
    index: int = Field(ge=0)


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    site_id: int
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignment_kind: AssignmentKind
    crew_id: int | None = None
    contractor_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    working_days: list[date] = Field(default_factory=list)
    order: int = 0
    labels: list[LabelResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


class ChecklistItemCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    order: int | None = Field(default=None, ge=0)


class ChecklistItemUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    done: bool | None = None
    order: int | None = Field(default=None, ge=0)


class ChecklistItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    title: str
    done: bool = False
    order: int = 0


class AttachmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    filename: str
    category: AttachmentCategory
    url: str
    size: int | None = None
    created_at: datetime | None = None


class PurchaseCreateRequest(BaseModel):
    material: str = Field(min_length=1, max_length=255)
    quantity: Decimal = Field(gt=0)
    unit: str = Field(default="un", max_length=20)
    notes: str | None = Field(default=None, max_length=2000)


class PurchaseStatusUpdateRequest(BaseModel):
    status: PurchaseStatus


class PurchaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    material: str
    quantity: Decimal
    unit: str | None = None
    status: PurchaseStatus = PurchaseStatus.PENDING
    notes: str | None = None
    created_at: datetime | None = None
