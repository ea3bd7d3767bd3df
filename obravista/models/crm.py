"""CRM models: leads, deals and everything hanging off a deal."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from obravista.core.enums import DealStage, InteractionKind, LeadStatus
from obravista.models.base import AuditMixin, Base, enum_column, utcnow


class Lead(Base, AuditMixin):
    __tablename__ = "crm_leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(40))
    document: Mapped[str | None] = mapped_column(String(20))
    address: Mapped[str | None] = mapped_column(String(500))
    status: Mapped[LeadStatus] = mapped_column(enum_column(LeadStatus), default=LeadStatus.NEW, nullable=False)

    deals = relationship("Deal", back_populates="lead", cascade="all, delete-orphan")


class Deal(Base, AuditMixin):
    __tablename__ = "crm_deals"
    __table_args__ = (Index("idx_crm_deals_stage", "stage"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lead_id: Mapped[int] = mapped_column(ForeignKey("crm_leads.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    estimated_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    stage: Mapped[DealStage] = mapped_column(enum_column(DealStage), default=DealStage.PROSPECTING, nullable=False)
    site_id: Mapped[int | None] = mapped_column(ForeignKey("obras.id", ondelete="SET NULL"))
    loss_reason: Mapped[str | None] = mapped_column(Text)

    lead = relationship("Lead", back_populates="deals")
    site = relationship("Site")
    interactions = relationship(
        "Interaction",
        back_populates="deal",
        cascade="all, delete-orphan",
        order_by="Interaction.occurred_at.desc()",
    )
    proposals = relationship(
        "Proposal",
        back_populates="deal",
        cascade="all, delete-orphan",
        order_by="Proposal.version.desc()",
    )
    survey = relationship("Survey", back_populates="deal", cascade="all, delete-orphan", uselist=False)


class Interaction(Base):
    __tablename__ = "crm_interactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    deal_id: Mapped[int] = mapped_column(ForeignKey("crm_deals.id", ondelete="CASCADE"), nullable=False, index=True)
    kind: Mapped[InteractionKind] = mapped_column(enum_column(InteractionKind), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("usuarios.id", ondelete="SET NULL"))
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    deal = relationship("Deal", back_populates="interactions")


class Proposal(Base):
    __tablename__ = "propostas"
    __table_args__ = (UniqueConstraint("deal_id", "version", name="uq_propostas_deal_version"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    deal_id: Mapped[int] = mapped_column(ForeignKey("crm_deals.id", ondelete="CASCADE"), nullable=False)
    budget_id: Mapped[int | None] = mapped_column(ForeignKey("orcamentos.id", ondelete="SET NULL"))
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    multiplier: Mapped[Decimal] = mapped_column(Numeric(8, 4), default=Decimal("1"), nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    validity_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    pdf_url: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    deal = relationship("Deal", back_populates="proposals")


class Survey(Base):
    """Site survey (vistoria) answers collected during a deal."""

    __tablename__ = "crm_vistorias"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    deal_id: Mapped[int] = mapped_column(ForeignKey("crm_deals.id", ondelete="CASCADE"), nullable=False, unique=True)
    answers: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    deal = relationship("Deal", back_populates="survey")
