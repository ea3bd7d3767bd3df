"""Auth and user administration schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from obravista.core.enums import UserType
from obravista.schemas.people import UserResponse


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class PermissionsUpdateRequest(BaseModel):
    permissions: dict[str, str] = Field(default_factory=dict)


class UserCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=6, max_length=256)
    type: UserType = UserType.USER
    custom_permissions: dict[str, str] = Field(default_factory=dict)
