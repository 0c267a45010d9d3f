"""Event and RSVP models."""

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum as SAEnum, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base, enum_values
from ..utils.datetime import utcnow


class EventType(str, enum.Enum):
    CURRICULAR = "curricular"
    EXTRACURRICULAR = "extracurricular"


class Event(Base):
    """School event optionally restricted to a scope."""

    __tablename__ = "events"

    event_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(String)
    event_type = Column(SAEnum(EventType, name="event_type", values_callable=enum_values), nullable=False)
    scope_id = Column(Uuid, ForeignKey("scopes.scope_id", ondelete="RESTRICT"))
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime)
    location = Column(String)
    created_by_id = Column(Uuid, ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    rsvps = relationship("EventRsvp", back_populates="event")


class EventRsvp(Base):
    __tablename__ = "event_rsvps"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="event_rsvps_event_user_unique"),
    )

    rsvp_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    rsvped_at = Column(DateTime, default=utcnow, nullable=False)

    event = relationship("Event", back_populates="rsvps")
    user = relationship("User", back_populates="rsvps")
