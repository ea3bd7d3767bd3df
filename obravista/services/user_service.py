"""User accounts, login and per-page permission overrides."""

from __future__ import annotations

import logging

from sqlalchemy import select

from obravista.auth.permissions import AccessLevel, PermissionSubject
from obravista.core.enums import UserType
from obravista.core.exceptions import AuthenticationError, ValidationError
from obravista.core.security import hash_password, verify_password
from obravista.models import User
from obravista.services.base_service import BaseService

logger = logging.getLogger(__name__)


def subject_for(user: User) -> PermissionSubject:
    return PermissionSubject(
        user_id=user.id,
        type=UserType(user.type),
        custom_permissions=dict(user.custom_permissions or {}),
    )


class UserService(BaseService):
    def get_user(self, user_id: int) -> User:
        return self._require(User, user_id, "User")

    def get_by_email(self, email: str) -> User | None:
        return self.db.scalars(select(User).where(User.email == email.strip().lower())).first()

    def list_users(self) -> list[User]:
        return list(self.db.scalars(select(User).order_by(User.name)))

    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        user_type: UserType = UserType.USER,
        custom_permissions: dict[str, str] | None = None,
    ) -> User:
        if self.get_by_email(email) is not None:
            raise ValidationError(f"E-mail {email} is already registered.")
        user = User(
            name=name,
            email=email.strip().lower(),
            hashed_password=hash_password(password),
            type=user_type,
            custom_permissions=self._clean_permissions(custom_permissions or {}),
        )
        self.db.add(user)
        self.commit()
        self.db.refresh(user)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.get_by_email(email)
        if user is None or not user.active or not verify_password(password, user.hashed_password):
            logger.info("auth.login_rejected", extra={"event": "auth.login_rejected"})
            raise AuthenticationError("Invalid credentials.")
        return user

    def set_permissions(self, user_id: int, permissions: dict[str, str]) -> User:
        """Replace a user's custom per-page levels."""
        user = self.get_user(user_id)
        user.custom_permissions = self._clean_permissions(permissions)
        self.commit()
        self.db.refresh(user)
        return user

    @staticmethod
    def _clean_permissions(permissions: dict[str, str]) -> dict[str, str]:
        cleaned: dict[str, str] = {}
        for page, level in permissions.items():
            try:
                cleaned[page] = AccessLevel.parse(level).value
            except ValueError as exc:
                raise ValidationError(f"Unknown access level {level!r} for page {page}.") from exc
        return cleaned
