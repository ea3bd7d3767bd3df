"""Specialties, contractors (prestadores) and crews (equipes)."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from obravista.core.enums import ContractType, CrewRole, PersonType, PixKeyType
from obravista.models.base import AuditMixin, Base, enum_column


class Specialty(Base):
    __tablename__ = "especialidades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)


class Contractor(Base, AuditMixin):
    __tablename__ = "prestadores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    specialty_id: Mapped[int | None] = mapped_column(ForeignKey("especialidades.id", ondelete="SET NULL"))
    phone: Mapped[str | None] = mapped_column(String(40))
    email: Mapped[str | None] = mapped_column(String(255))
    person_type: Mapped[PersonType] = mapped_column(
        enum_column(PersonType), default=PersonType.INDIVIDUAL, nullable=False
    )
    cpf: Mapped[str | None] = mapped_column(String(11), unique=True)
    cnpj: Mapped[str | None] = mapped_column(String(14), unique=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    pix_key_type: Mapped[PixKeyType | None] = mapped_column(enum_column(PixKeyType))
    pix_key: Mapped[str | None] = mapped_column(String(255))
    contract_type: Mapped[ContractType] = mapped_column(
        enum_column(ContractType), default=ContractType.DAILY_RATE, nullable=False
    )
    daily_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    meal_allowance: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    transport_allowance: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    bonus: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    advance_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    pay_day: Mapped[int | None] = mapped_column(Integer)
    advance_day: Mapped[int | None] = mapped_column(Integer)
    uses_attendance: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    specialty = relationship("Specialty")

    @property
    def specialty_name(self) -> str | None:
        return self.specialty.name if self.specialty else None


class Crew(Base, AuditMixin):
    __tablename__ = "equipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(7), default="#3B82F6", nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    members = relationship("CrewMember", back_populates="crew", cascade="all, delete-orphan")


class CrewMember(Base):
    __tablename__ = "membros_equipe"
    __table_args__ = (
        UniqueConstraint("crew_id", "contractor_id", name="uq_membros_equipe_prestador"),
        UniqueConstraint("crew_id", "user_id", name="uq_membros_equipe_usuario"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    crew_id: Mapped[int] = mapped_column(ForeignKey("equipes.id", ondelete="CASCADE"), nullable=False)
    contractor_id: Mapped[int | None] = mapped_column(ForeignKey("prestadores.id", ondelete="CASCADE"))
    user_id: Mapped[int | None] = mapped_column(ForeignKey("usuarios.id", ondelete="CASCADE"))
    role: Mapped[CrewRole] = mapped_column(enum_column(CrewRole), default=CrewRole.MEMBER, nullable=False)

    crew = relationship("Crew", back_populates="members")
