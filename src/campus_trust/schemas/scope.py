"""Pydantic schemas for scope endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models import ScopeKind


class ScopeCreate(BaseModel):
    """Request body for creating a scope."""

    actor_id: UUID
    kind: ScopeKind
    name: Optional[str] = Field(None, max_length=120)
    access_code: Optional[str] = Field(None, max_length=64)
    grade_number: Optional[int] = None
    section_name: Optional[str] = Field(None, max_length=16)


class ScopeRead(BaseModel):
    """Scope as shown to members; the access code is never included."""

    model_config = ConfigDict(from_attributes=True)

    scope_id: UUID
    name: str
    kind: ScopeKind
    grade_number: Optional[int]
    section_name: Optional[str]
    parent_grade_number: Optional[int]
    created_at: datetime


class ScopeAdminRead(ScopeRead):
    access_code: Optional[str]
