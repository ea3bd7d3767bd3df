"""Crews (equipes) and their members."""

from __future__ import annotations

from sqlalchemy import func, select

from obravista.core.exceptions import ValidationError
from obravista.models import Contractor, Crew, CrewMember, Task, User
from obravista.schemas.people import CrewCreateRequest, CrewMemberCreateRequest
from obravista.services.base_service import BaseService


class CrewService(BaseService):
    def list_crews(self, active_only: bool = False) -> list[Crew]:
        query = select(Crew).order_by(Crew.name)
        if active_only:
            query = query.where(Crew.active.is_(True))
        return list(self.db.scalars(query))

    def get_crew(self, crew_id: int) -> Crew:
        return self._require(Crew, crew_id, "Crew")

    def create_crew(self, payload: CrewCreateRequest) -> Crew:
        crew = Crew(**payload.model_dump())
        self.db.add(crew)
        self.commit()
        self.db.refresh(crew)
        return crew

    def update_crew(self, crew_id: int, payload: CrewCreateRequest) -> Crew:
        crew = self.get_crew(crew_id)
        for field, value in payload.model_dump().items():
            setattr(crew, field, value)
        self.commit()
        self.db.refresh(crew)
        return crew

    def delete_crew(self, crew_id: int) -> None:
        """Delete a crew; tasks assigned to it must be reassigned or deleted first."""
        crew = self.get_crew(crew_id)
        assigned = self.db.scalar(select(func.count(Task.id)).where(Task.crew_id == crew.id))
        if assigned:
            raise ValidationError(f"Crew {crew.id} still has {assigned} task(s); reassign or delete them first.")
        self.db.delete(crew)
        self.commit()

    def add_member(self, crew_id: int, payload: CrewMemberCreateRequest) -> CrewMember:
        crew = self.get_crew(crew_id)
        if payload.contractor_id is not None:
            self._require(Contractor, payload.contractor_id, "Contractor")
            duplicate = select(CrewMember.id).where(
                CrewMember.crew_id == crew.id, CrewMember.contractor_id == payload.contractor_id
            )
        else:
            self._require(User, payload.user_id, "User")
            duplicate = select(CrewMember.id).where(CrewMember.crew_id == crew.id, CrewMember.user_id == payload.user_id)
        if self.db.scalar(duplicate) is not None:
            raise ValidationError("This person is already a member of the crew.")

        member = CrewMember(crew_id=crew.id, **payload.model_dump())
        self.db.add(member)
        self.commit()
        self.db.refresh(member)
        return member

    def remove_member(self, crew_id: int, member_id: int) -> None:
        member = self._require(CrewMember, member_id, "Crew member")
        if member.crew_id != crew_id:
            raise ValidationError(f"Member {member_id} does not belong to crew {crew_id}.")
        self.db.delete(member)
        self.commit()
