"""User administration endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from obravista.api.v1._authz import authorize
from obravista.auth.permissions import Action
from obravista.database.db import get_db
from obravista.schemas.auth import PermissionsUpdateRequest, UserCreateRequest
from obravista.schemas.common import ok, serialize
from obravista.schemas.people import UserResponse
from obravista.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

PAGE = "usuarios"


@router.get("", dependencies=[Depends(authorize(PAGE, Action.READ))])
def list_users(db: Session = Depends(get_db)) -> dict:
    return ok(serialize(UserResponse, UserService(db).list_users()))


@router.put("/{user_id}/permissions", dependencies=[Depends(authorize(PAGE, Action.EDIT))])
def set_permissions(user_id: int, payload: PermissionsUpdateRequest, db: Session = Depends(get_db)) -> dict:
    user = UserService(db).set_permissions(user_id, payload.permissions)
    return ok(serialize(UserResponse, user), message="Permissions updated.")


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(authorize(PAGE, Action.CREATE))])
def create_user(payload: UserCreateRequest, db: Session = Depends(get_db)) -> dict:
    user = UserService(db).create_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        user_type=payload.type,
        custom_permissions=payload.custom_permissions,
    )
    return ok(serialize(UserResponse, user))
