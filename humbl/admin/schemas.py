"""Schemas for admin operations."""
from __future__ import annotations

from pydantic import BaseModel


class UserAdminResponse(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    roles: list[str]
    is_active: bool


class UserStatusUpdate(BaseModel):
    is_active: bool


class StatusUpdate(BaseModel):
    status: str


__all__ = ["UserAdminResponse", "UserStatusUpdate", "StatusUpdate"]
