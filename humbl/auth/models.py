"""Pydantic schemas for FastAPI Users integration."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from fastapi_users import schemas
from pydantic import ConfigDict, EmailStr, Field, model_validator

from ..infrastructure.database import Role, User


class UserRead(schemas.BaseUser[str]):
    """Account details returned by the auth and user endpoints."""

    full_name: Optional[str] = None
    roles: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="before")
    @classmethod
    def _flatten_roles(cls, data: Any) -> Any:
        if isinstance(data, User):
            return {
                "id": data.id,
                "email": data.email,
                "is_active": data.is_active,
                "is_superuser": bool(data.is_superuser),
                "is_verified": bool(data.is_verified),
                "full_name": data.full_name,
                "roles": sorted(role.name for role in data.roles),
                "created_at": data.created_at,
            }
        if isinstance(data, dict) and data.get("roles"):
            data = dict(data)
            data["roles"] = [role.name if isinstance(role, Role) else str(role) for role in data["roles"]]
        return data


class UserCreate(schemas.BaseUserCreate):
    """Payload accepted by ``/auth/register``."""

    email: EmailStr
    full_name: Optional[str] = None


class UserUpdate(schemas.BaseUserUpdate):
    full_name: Optional[str] = None


__all__ = ["UserRead", "UserCreate", "UserUpdate"]
