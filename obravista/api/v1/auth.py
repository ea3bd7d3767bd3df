"""Auth endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from obravista.api.v1._authz import current_subject
from obravista.auth.jwt import create_access_token
from obravista.auth.permissions import ALL_PAGES, MODULES, PermissionSubject, has_module_access, resolve_access_level
from obravista.core.config import get_config
from obravista.database.db import get_db
from obravista.schemas.auth import LoginRequest, TokenResponse
from obravista.schemas.common import ok, serialize
from obravista.schemas.people import UserResponse
from obravista.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> dict:
    cfg = get_config()
    user = UserService(db).authenticate(payload.email, payload.password)
    token = create_access_token(
        user_id=user.id,
        email=user.email,
        user_type=user.type,
        secret=cfg.JWT_SECRET,
        ttl_minutes=cfg.JWT_ACCESS_TTL_MINUTES,
    )
    response = TokenResponse(access_token=token, user=UserResponse.model_validate(user))
    return ok(response.model_dump(mode="json"))


@router.get("/me")
def me(subject: PermissionSubject = Depends(current_subject), db: Session = Depends(get_db)) -> dict:
    user = UserService(db).get_user(subject.user_id)
    pages = sorted(set(ALL_PAGES) | {page for pages in MODULES.values() for page in pages})
    return ok(
        {
            "user": serialize(UserResponse, user),
            "pages": {page: resolve_access_level(page, subject).value for page in pages},
            "modules": {module_id: has_module_access(module_id, subject) for module_id in MODULES},
        }
    )
