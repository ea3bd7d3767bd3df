"""Construction site (obra) model module."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from obravista.core.enums import SiteStatus
from obravista.models.base import AuditMixin, Base, enum_column


class Site(Base, AuditMixin):
    __tablename__ = "obras"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(500), default="A configurar", nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[SiteStatus] = mapped_column(enum_column(SiteStatus), default=SiteStatus.BUDGETING, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    lead_id: Mapped[int | None] = mapped_column(ForeignKey("crm_leads.id", ondelete="SET NULL"))
    estimated_budget: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
