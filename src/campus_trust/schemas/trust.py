"""Pydantic schemas for content, credibility, reputation and moderation endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models import EventType, PunishmentType, Severity, ViolationType


class PostCreate(BaseModel):
    author_id: UUID
    content: str = Field(..., min_length=1, max_length=5000)
    scope_id: Optional[UUID] = None


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    post_id: UUID
    author_id: UUID
    scope_id: Optional[UUID]
    content: str
    credibility_rating: float
    created_at: datetime


class AccuracyRatingCreate(BaseModel):
    user_id: UUID
    rating: int = Field(..., description="Accuracy vote from 1 to 5 stars.")


class AccuracyRatingResponse(BaseModel):
    success: bool
    rating: int
    post_credibility: float
    author_credibility: float


class EventCreate(BaseModel):
    creator_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    event_type: EventType
    start_time: datetime
    end_time: Optional[datetime] = None
    scope_id: Optional[UUID] = None
    description: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=200)


class EventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: UUID
    title: str
    event_type: EventType
    scope_id: Optional[UUID]
    start_time: datetime
    end_time: Optional[datetime]
    created_by_id: UUID


class RsvpRequest(BaseModel):
    user_id: UUID


class RsvpResponse(BaseModel):
    attending: bool
    reputation: float


class ScheduleUpsert(BaseModel):
    actor_id: UUID
    scope_id: UUID
    day_of_week: int = Field(..., ge=1, le=7)
    period_number: int = Field(..., ge=1, le=7)
    subject: Optional[str] = Field(None, max_length=120)
    teacher_name: Optional[str] = Field(None, max_length=120)


class ScheduleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    schedule_id: UUID
    scope_id: UUID
    day_of_week: int
    period_number: int
    subject: Optional[str]
    teacher_name: Optional[str]


class ReputationRead(BaseModel):
    user_id: UUID
    reputation: float


class PunishmentQuery(BaseModel):
    violation_type: ViolationType
    severity: Severity
    prior_violation_count: int = Field(0, ge=0)


class PunishmentRead(BaseModel):
    punishment_type: PunishmentType
    credibility_penalty: float
    ban_duration_hours: Optional[int] = None
