"""Tool inventory (ferramentas) and its custody event log."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from obravista.core.enums import MovementKind, ToolStatus
from obravista.models.base import AuditMixin, Base, enum_column, utcnow


class Tool(Base, AuditMixin):
    __tablename__ = "ferramentas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[str | None] = mapped_column(String(120))
    code: Mapped[str | None] = mapped_column(String(60), unique=True)
    # Cached from the movement log; maintenance/lost are set by direct edits only.
    status: Mapped[ToolStatus] = mapped_column(enum_column(ToolStatus), default=ToolStatus.AVAILABLE, nullable=False)

    movements = relationship(
        "ToolMovement",
        back_populates="tool",
        cascade="all, delete-orphan",
        order_by="ToolMovement.occurred_at",
    )


class ToolMovement(Base):
    """Immutable custody event. Rows are only ever inserted."""

    __tablename__ = "movimentacoes_ferramentas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tool_id: Mapped[int] = mapped_column(ForeignKey("ferramentas.id", ondelete="CASCADE"), nullable=False, index=True)
    kind: Mapped[MovementKind] = mapped_column(enum_column(MovementKind), nullable=False)
    site_id: Mapped[int | None] = mapped_column(ForeignKey("obras.id", ondelete="SET NULL"))
    responsible_id: Mapped[int | None] = mapped_column(ForeignKey("prestadores.id", ondelete="SET NULL"))
    note: Mapped[str | None] = mapped_column(Text)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    tool = relationship("Tool", back_populates="movements")
