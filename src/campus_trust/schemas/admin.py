"""Pydantic schemas for the admin succession ledger and student ID issuer."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import UserSummary


class HandoverRequest(BaseModel):
    current_admin_id: UUID
    successor_id: UUID
    notes: Optional[str] = Field(None, max_length=500)


class SuccessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    succession_id: UUID
    previous_admin_id: UUID
    new_admin_id: UUID
    notes: Optional[str]
    handover_date: datetime


class HandoverResponse(BaseModel):
    success: bool
    message: str
    record: SuccessionRead


class PromotionRequest(BaseModel):
    current_admin_id: UUID
    user_id: UUID


class PromotionResponse(BaseModel):
    success: bool
    message: str
    user: UserSummary


class StudentIdCreate(BaseModel):
    admin_id: UUID
    username: str = Field(..., min_length=1, max_length=64)
    grade: int
    class_name: str = Field(..., min_length=1, max_length=16)


class StudentIdRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ticket_id: UUID
    username: str
    student_id: str
    grade: int
    class_name: str
    is_assigned: bool
    assigned_to_user_id: Optional[UUID]
    created_by_admin_id: UUID
    created_at: datetime
    assigned_at: Optional[datetime]


class RegistrationClaim(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=32)
    username: str = Field(..., min_length=1, max_length=64)
    email: Optional[str] = Field(None, max_length=254)
