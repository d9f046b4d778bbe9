"""Schemas for folder endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

MAX_FOLDER_NAME_CHARS = 200


class FolderCreate(BaseModel):
    name: str = ""


class FolderUpdate(BaseModel):
    name: str = ""


class FolderResponse(BaseModel):
    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


__all__ = ["FolderCreate", "FolderUpdate", "FolderResponse", "MAX_FOLDER_NAME_CHARS"]
