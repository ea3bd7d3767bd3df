"""Daily attendance (frequencia) and payroll deductions."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from obravista.models.base import AuditMixin, Base


class AttendanceRecord(Base, AuditMixin):
    __tablename__ = "frequencia"
    __table_args__ = (UniqueConstraint("date", "contractor_id", name="uq_frequencia_data_prestador"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    contractor_id: Mapped[int] = mapped_column(ForeignKey("prestadores.id", ondelete="CASCADE"), nullable=False)
    present: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    site_id: Mapped[int | None] = mapped_column(ForeignKey("obras.id", ondelete="SET NULL"))
    note: Mapped[str | None] = mapped_column(Text)

    contractor = relationship("Contractor")
    site = relationship("Site")


class Deduction(Base, AuditMixin):
    __tablename__ = "descontos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    contractor_id: Mapped[int] = mapped_column(ForeignKey("prestadores.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500))
