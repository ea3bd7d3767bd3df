"""Contractor, specialty, crew and user schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from obravista.core.enums import ContractType, CrewRole, PersonType, PixKeyType, UserType
from obravista.domain.people import normalize_tax_id


class SpecialtyCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)


class SpecialtyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ContractorBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    specialty_id: int | None = Field(default=None, ge=1)
    phone: str | None = Field(default=None, max_length=40)
    email: str | None = Field(default=None, max_length=255)
    person_type: PersonType = PersonType.INDIVIDUAL
    cpf: str | None = None
    cnpj: str | None = None
    active: bool = True
    pix_key_type: PixKeyType | None = None
    pix_key: str | None = Field(default=None, max_length=255)
    contract_type: ContractType = ContractType.DAILY_RATE
    daily_rate: Decimal | None = Field(default=None, ge=0)
    meal_allowance: Decimal | None = Field(default=None, ge=0)
    transport_allowance: Decimal | None = Field(default=None, ge=0)
    salary: Decimal | None = Field(default=None, ge=0)
    bonus: Decimal | None = Field(default=None, ge=0)
    advance_amount: Decimal | None = Field(default=None, ge=0)
    pay_day: int | None = Field(default=None, ge=1, le=31)
    advance_day: int | None = Field(default=None, ge=1, le=31)
    uses_attendance: bool = True

    @model_validator(mode="after")
    def _tax_id_matches_person_type(self) -> "ContractorBase":
        if self.person_type is PersonType.INDIVIDUAL:
            self.cpf = normalize_tax_id(self.cpf, PersonType.INDIVIDUAL)
            self.cnpj = None
        else:
            self.cnpj = normalize_tax_id(self.cnpj, PersonType.COMPANY)
            self.cpf = None
        return self


class ContractorCreateRequest(ContractorBase):
    pass


class ContractorUpdateRequest(ContractorBase):
    pass


class ContractorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    specialty_id: int | None = None
    specialty_name: str | None = None
    phone: str | None = None
    email: str | None = None
    person_type: PersonType
    cpf: str | None = None
    cnpj: str | None = None
    active: bool
    pix_key_type: PixKeyType | None = None
    pix_key: str | None = None
    contract_type: ContractType
    daily_rate: Decimal | None = None
    salary: Decimal | None = None
    advance_amount: Decimal | None = None
    pay_day: int | None = None
    advance_day: int | None = None
    uses_attendance: bool


class CrewCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    color: str = Field(default="#3B82F6", pattern=r"^#[0-9A-Fa-f]{6}$")
    active: bool = True


class CrewMemberCreateRequest(BaseModel):
    contractor_id: int | None = Field(default=None, ge=1)
    user_id: int | None = Field(default=None, ge=1)
    role: CrewRole = CrewRole.MEMBER

    @model_validator(mode="after")
    def _exactly_one_person(self) -> "CrewMemberCreateRequest":
        if (self.contractor_id is None) == (self.user_id is None):
            raise ValueError("member must reference exactly one of contractor_id or user_id")
        return self


class CrewMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    crew_id: int
    contractor_id: int | None = None
    user_id: int | None = None
    role: CrewRole


class CrewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    color: str
    active: bool
    members: list[CrewMemberResponse] = Field(default_factory=list)
    created_at: datetime | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    type: UserType = UserType.USER
    active: bool = True
    custom_permissions: dict[str, str] = Field(default_factory=dict)
