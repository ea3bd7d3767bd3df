"""Contractors (prestadores) and the specialty catalog."""

from __future__ import annotations

from sqlalchemy import func, or_, select

from obravista.core.exceptions import ValidationError
from obravista.models import Contractor, Specialty, Task
from obravista.schemas.people import ContractorCreateRequest, ContractorUpdateRequest, SpecialtyCreateRequest
from obravista.services.base_service import BaseService


class ContractorService(BaseService):
    def list_contractors(self, active_only: bool = False, attendance_only: bool = False) -> list[Contractor]:
        query = select(Contractor).order_by(Contractor.name)
        if active_only:
            query = query.where(Contractor.active.is_(True))
        if attendance_only:
            query = query.where(Contractor.uses_attendance.is_(True))
        return list(self.db.scalars(query))

    def get_contractor(self, contractor_id: int) -> Contractor:
        return self._require(Contractor, contractor_id, "Contractor")

    def create_contractor(self, payload: ContractorCreateRequest) -> Contractor:
        self._check_specialty(payload.specialty_id)
        self._assert_unique_tax_id(payload.cpf, payload.cnpj)
        contractor = Contractor(**payload.model_dump())
        self.db.add(contractor)
        self.commit()
        self.db.refresh(contractor)
        return contractor

    def update_contractor(self, contractor_id: int, payload: ContractorUpdateRequest) -> Contractor:
        contractor = self.get_contractor(contractor_id)
        self._check_specialty(payload.specialty_id)
        self._assert_unique_tax_id(payload.cpf, payload.cnpj, exclude_id=contractor.id)
        for field, value in payload.model_dump().items():
            setattr(contractor, field, value)
        self.commit()
        self.db.refresh(contractor)
        return contractor

    def delete_contractor(self, contractor_id: int) -> None:
        contractor = self.get_contractor(contractor_id)
        assigned = self.db.scalar(select(func.count(Task.id)).where(Task.contractor_id == contractor.id))
        if assigned:
            raise ValidationError(
                f"Contractor {contractor.id} still has {assigned} task(s); reassign or delete them first."
            )
        self.db.delete(contractor)
        self.commit()

    def list_specialties(self) -> list[Specialty]:
        return list(self.db.scalars(select(Specialty).order_by(Specialty.name)))

    def create_specialty(self, payload: SpecialtyCreateRequest) -> Specialty:
        name = payload.name.strip()
        if self.db.scalar(select(Specialty.id).where(Specialty.name == name)) is not None:
            raise ValidationError(f"Specialty {name!r} already exists.")
        specialty = Specialty(name=name)
        self.db.add(specialty)
        self.commit()
        self.db.refresh(specialty)
        return specialty

    def _check_specialty(self, specialty_id: int | None) -> None:
        if specialty_id is not None:
            self._require(Specialty, specialty_id, "Specialty")

    def _assert_unique_tax_id(self, cpf: str | None, cnpj: str | None, exclude_id: int | None = None) -> None:
        clauses = []
        if cpf:
            clauses.append(Contractor.cpf == cpf)
        if cnpj:
            clauses.append(Contractor.cnpj == cnpj)
        if not clauses:
            return
        query = select(Contractor.id).where(or_(*clauses))
        if exclude_id is not None:
            query = query.where(Contractor.id != exclude_id)
        if self.db.scalar(query) is not None:
            raise ValidationError("A contractor with this CPF/CNPJ is already registered.")
