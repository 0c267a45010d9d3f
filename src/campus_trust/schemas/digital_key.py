"""Pydantic schemas for digital key endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UnlockRequest(BaseModel):
    user_id: UUID
    scope_id: UUID
    access_code: str = Field(..., min_length=1, max_length=64)


class DigitalKeyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key_id: UUID
    user_id: UUID
    scope_id: UUID
    unlocked_at: datetime


class UnlockResponse(BaseModel):
    granted: bool
    already_held: bool
    message: str
    key: DigitalKeyRead


class AccessCheck(BaseModel):
    has_access: bool
