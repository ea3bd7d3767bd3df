"""Shared authorization helpers for API v1 route modules."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from obravista.auth.jwt import read_access_token
from obravista.auth.permissions import Action, PermissionSubject, require_action
from obravista.core.config import get_config
from obravista.core.exceptions import AuthenticationError, AuthorizationError
from obravista.database.db import get_db
from obravista.models import User
from obravista.services.user_service import subject_for


def _extract_bearer_token(authorization: str | None) -> str:
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Authorization header is required.")
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Authorization header must use Bearer token.")
    return parts[1].strip()


def current_subject(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> PermissionSubject:
    """Resolve the caller from the bearer token; permissions are read fresh from the database."""
    claims = read_access_token(_extract_bearer_token(authorization), secret=get_config().JWT_SECRET)
    user = db.get(User, claims.user_id)
    if user is None or not user.active:
        raise AuthenticationError("User for this token no longer exists or is inactive.")
    return subject_for(user)


def authorize(page: str, action: Action) -> Callable[..., PermissionSubject]:
    """Route dependency requiring ``action`` rights on ``page``."""

    def dependency(subject: PermissionSubject = Depends(current_subject)) -> PermissionSubject:
        require_action(page, action, subject)
        return subject

    return dependency


def map_auth_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, AuthenticationError):
        return 401, str(exc)
    if isinstance(exc, AuthorizationError):
        return 403, str(exc)
    return 401, "Unauthorized."
