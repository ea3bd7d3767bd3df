"""CRM lead CRUD."""

from __future__ import annotations

from sqlalchemy import select

from obravista.models import Lead
from obravista.schemas.crm import LeadCreateRequest, LeadUpdateRequest
from obravista.services.base_service import BaseService


class LeadService(BaseService):
    def list_leads(self) -> list[Lead]:
        return list(self.db.scalars(select(Lead).order_by(Lead.created_at.desc(), Lead.id.desc())))

    def get_lead(self, lead_id: int) -> Lead:
        return self._require(Lead, lead_id, "Lead")

    def create_lead(self, payload: LeadCreateRequest) -> Lead:
        lead = Lead(**payload.model_dump())
        self.db.add(lead)
        self.commit()
        self.db.refresh(lead)
        return lead

    def update_lead(self, lead_id: int, payload: LeadUpdateRequest) -> Lead:
        lead = self.get_lead(lead_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(lead, field, value)
        self.commit()
        self.db.refresh(lead)
        return lead

    def delete_lead(self, lead_id: int) -> None:
        self.db.delete(self.get_lead(lead_id))
        self.commit()
