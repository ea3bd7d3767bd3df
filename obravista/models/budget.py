"""Budget (orcamento) model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from obravista.core.enums import BudgetItemKind
from obravista.domain.budget import summarize
from obravista.models.base import AuditMixin, Base, enum_column


class Budget(Base, AuditMixin):
    __tablename__ = "orcamentos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    site_id: Mapped[int | None] = mapped_column(ForeignKey("obras.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    bdi: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=Decimal("0"), nullable=False)
    is_template: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    items = relationship(
        "BudgetItem",
        back_populates="budget",
        cascade="all, delete-orphan",
        order_by="BudgetItem.position",
    )

    @property
    def direct_cost(self) -> Decimal:
        return summarize(self.items).direct_cost

    @property
    def sale_total(self) -> Decimal:
        return summarize(self.items).sale_total


class BudgetItem(Base):
    __tablename__ = "orcamento_itens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    budget_id: Mapped[int] = mapped_column(ForeignKey("orcamentos.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    wbs: Mapped[str | None] = mapped_column(String(40))
    code: Mapped[str | None] = mapped_column(String(60))
    description: Mapped[str] = mapped_column(String(1000), nullable=False)
    unit: Mapped[str | None] = mapped_column(String(20))
    kind: Mapped[BudgetItemKind] = mapped_column(enum_column(BudgetItemKind), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(14, 4), default=Decimal("0"), nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    sale_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)

    budget = relationship("Budget", back_populates="items")
