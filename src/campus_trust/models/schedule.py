"""Section timetable model."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid

from ..core.database import Base
from ..utils.datetime import utcnow


class Schedule(Base):
    """One period slot of a section's weekly timetable."""

    __tablename__ = "schedules"
    __table_args__ = (
        UniqueConstraint("scope_id", "day_of_week", "period_number", name="schedules_slot_unique"),
        CheckConstraint("day_of_week >= 1 AND day_of_week <= 7", name="schedules_day_range"),
        CheckConstraint("period_number >= 1 AND period_number <= 7", name="schedules_period_range"),
    )

    schedule_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    scope_id = Column(Uuid, ForeignKey("scopes.scope_id", ondelete="RESTRICT"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    period_number = Column(Integer, nullable=False)
    teacher_name = Column(String)
    subject = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
