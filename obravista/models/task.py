"""Kanban task (atribuicao) model and its sub-resources."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, Boolean, Column, Date, ForeignKey, Index, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from obravista.core.enums import AssignmentKind, AttachmentCategory, PurchaseStatus, TaskPriority, TaskStatus
from obravista.models.base import AuditMixin, Base, enum_column

task_labels = Table(
    "atribuicao_etiquetas",
    Base.metadata,
    Column("task_id", ForeignKey("atribuicoes.id", ondelete="CASCADE"), primary_key=True),
    Column("label_id", ForeignKey("etiquetas.id", ondelete="CASCADE"), primary_key=True),
)


class Task(Base, AuditMixin):
    __tablename__ = "atribuicoes"
    __table_args__ = (Index("idx_atribuicoes_site_status_order", "site_id", "status", "ordem"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    site_id: Mapped[int] = mapped_column(ForeignKey("obras.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[TaskStatus] = mapped_column(enum_column(TaskStatus), default=TaskStatus.TODO, nullable=False)
    priority: Mapped[TaskPriority] = mapped_column(
        enum_column(TaskPriority), default=TaskPriority.MEDIUM, nullable=False
    )
    assignment_kind: Mapped[AssignmentKind] = mapped_column(enum_column(AssignmentKind), nullable=False)
    crew_id: Mapped[int | None] = mapped_column(ForeignKey("equipes.id", ondelete="RESTRICT"))
    contractor_id: Mapped[int | None] = mapped_column(ForeignKey("prestadores.id", ondelete="RESTRICT"))
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    # ISO date strings
    working_days: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    order: Mapped[int] = mapped_column("ordem", Integer, default=0, nullable=False)

    checklist = relationship(
        "ChecklistItem", back_populates="task", cascade="all, delete-orphan", order_by="ChecklistItem.order"
    )
    attachments = relationship("Attachment", back_populates="task", cascade="all, delete-orphan")
    purchases = relationship("PurchaseRequest", back_populates="task", cascade="all, delete-orphan")
    labels = relationship("Label", secondary=task_labels, back_populates="tasks", order_by="Label.name")


class ChecklistItem(Base):
    __tablename__ = "checklists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    task_id: Mapped[int] = mapped_column(ForeignKey("atribuicoes.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    done: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    order: Mapped[int] = mapped_column("ordem", Integer, default=0, nullable=False)

    task = relationship("Task", back_populates="checklist")


class Attachment(Base, AuditMixin):
    __tablename__ = "anexos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    task_id: Mapped[int] = mapped_column(ForeignKey("atribuicoes.id", ondelete="CASCADE"), nullable=False, index=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    stored_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str | None] = mapped_column(String(120))
    category: Mapped[AttachmentCategory] = mapped_column(enum_column(AttachmentCategory), nullable=False)
    size: Mapped[int | None] = mapped_column(Integer)
    url: Mapped[str] = mapped_column(String(500), nullable=False)

    task = relationship("Task", back_populates="attachments")


class Label(Base):
    __tablename__ = "etiquetas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(60), nullable=False, unique=True)
    color: Mapped[str] = mapped_column(String(7), default="#3B82F6", nullable=False)

    tasks = relationship("Task", secondary=task_labels, back_populates="labels")


class PurchaseRequest(Base, AuditMixin):
    __tablename__ = "compras"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    task_id: Mapped[int] = mapped_column(ForeignKey("atribuicoes.id", ondelete="CASCADE"), nullable=False, index=True)
    material: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    unit: Mapped[str | None] = mapped_column(String(20), default="un")
    status: Mapped[PurchaseStatus] = mapped_column(
        enum_column(PurchaseStatus), default=PurchaseStatus.PENDING, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text)

    task = relationship("Task", back_populates="purchases")
