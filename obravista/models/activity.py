"""Activity log (logs) of changes made through the kanban board."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from obravista.core.enums import LogAction, LogEntity
from obravista.models.base import Base, enum_column, utcnow


class ActivityLog(Base):
    """Append-only audit row. Deleted tasks keep their rows with ``task_id`` cleared."""

    __tablename__ = "logs"
    __table_args__ = (Index("idx_logs_created_at", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("usuarios.id", ondelete="SET NULL"), index=True)
    task_id: Mapped[int | None] = mapped_column(ForeignKey("atribuicoes.id", ondelete="SET NULL"), index=True)
    entity: Mapped[LogEntity] = mapped_column(enum_column(LogEntity), nullable=False)
    action: Mapped[LogAction] = mapped_column(enum_column(LogAction), nullable=False)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User")
    task = relationship("Task")
