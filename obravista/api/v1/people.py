"""Crew, contractor and specialty endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action
from obravista.database.db import get_db
from obravista.schemas.common import ok, serialize
from obravista.schemas.people import (
    ContractorCreateRequest,
    ContractorResponse,
    ContractorUpdateRequest,
    CrewCreateRequest,
    CrewMemberCreateRequest,
    CrewMemberResponse,
    CrewResponse,
    SpecialtyCreateRequest,
    SpecialtyResponse,
)
from obravista.services.contractor_service import ContractorService
from obravista.services.crew_service import CrewService

router = APIRouter(tags=["people"])

CREWS = "equipes"
CONTRACTORS = "prestadores"


@router.get("/crews", dependencies=[Depends(authorize(CREWS, Action.READ))])
def list_crews(active_only: bool = False, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(CrewResponse, CrewService(db).list_crews(active_only)))


@router.get("/crews/{crew_id}", dependencies=[Depends(authorize(CREWS, Action.READ))])
def get_crew(crew_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(CrewResponse, CrewService(db).get_crew(crew_id)))


@router.post("/crews", status_code=status.HTTP_201_CREATED, dependencies=[Depends(authorize(CREWS, Action.CREATE))])
def create_crew(payload: CrewCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(CrewResponse, CrewService(db).create_crew(payload)))


@router.put("/crews/{crew_id}", dependencies=[Depends(authorize(CREWS, Action.EDIT))])
def update_crew(crew_id: int, payload: CrewCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(CrewResponse, CrewService(db).update_crew(crew_id, payload)))


@router.delete("/crews/{crew_id}", dependencies=[Depends(authorize(CREWS, Action.DELETE))])
def delete_crew(crew_id: int, db: Session = Depends(get_db)) -> dict:
    CrewService(db).delete_crew(crew_id)
    return ok(message="Crew deleted.")


@router.post(
    "/crews/{crew_id}/members",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(CREWS, Action.EDIT))],
)
def add_member(crew_id: int, payload: CrewMemberCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(CrewMemberResponse, CrewService(db).add_member(crew_id, payload)))


@router.delete("/crews/{crew_id}/members/{member_id}", dependencies=[Depends(authorize(CREWS, Action.EDIT))])
def remove_member(crew_id: int, member_id: int, db: Session = Depends(get_db)) -> dict:
    CrewService(db).remove_member(crew_id, member_id)
    return ok(message="Member removed.")


@router.get("/contractors", dependencies=[Depends(authorize(CONTRACTORS, Action.READ))])
def list_contractors(
    active_only: bool = False,
    attendance_only: bool = False,
    db: Session = Depends(get_db),
) -> dict:
    contractors = ContractorService(db).list_contractors(active_only=active_only, attendance_only=attendance_only)
    return ok(serialize(ContractorResponse, contractors))


@router.get("/contractors/{contractor_id}", dependencies=[Depends(authorize(CONTRACTORS, Action.READ))])
def get_contractor(contractor_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(ContractorResponse, ContractorService(db).get_contractor(contractor_id)))


@router.post(
    "/contractors",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(CONTRACTORS, Action.CREATE))],
)
def create_contractor(payload: ContractorCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(ContractorResponse, ContractorService(db).create_contractor(payload)))


@router.put("/contractors/{contractor_id}", dependencies=[Depends(authorize(CONTRACTORS, Action.EDIT))])
def update_contractor(contractor_id: int, payload: ContractorUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(ContractorResponse, ContractorService(db).update_contractor(contractor_id, payload)))


@router.delete("/contractors/{contractor_id}", dependencies=[Depends(authorize(CONTRACTORS, Action.DELETE))])
def delete_contractor(contractor_id: int, db: Session = Depends(get_db)) -> dict:
    ContractorService(db).delete_contractor(contractor_id)
    return ok(message="Contractor deleted.")


@router.get("/specialties", dependencies=[Depends(authorize(CONTRACTORS, Action.READ))])
def list_specialties(db: Session = Depends(get_db)) -> dict:
    return ok(serialize(SpecialtyResponse, ContractorService(db).list_specialties()))


@router.post(
    "/specialties",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(CONTRACTORS, Action.CREATE))],
)
def create_specialty(payload: SpecialtyCreateRequest, db: Session = Depends(get_db)) -> dict:
    return ok(serialize(SpecialtyResponse, ContractorService(db).create_specialty(payload)))
