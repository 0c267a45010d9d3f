"""Moderation violation and punishment records."""

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum as SAEnum, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base, enum_values
from ..utils.datetime import utcnow


class ViolationType(str, enum.Enum):
    SPAM = "spam"
    OFFENSIVE = "offensive"
    HATE_SPEECH = "hate_speech"
    HARASSMENT = "harassment"
    INAPPROPRIATE = "inappropriate"


class Severity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class PunishmentType(str, enum.Enum):
    WARNING = "warning"
    CREDIBILITY_REDUCTION = "credibility_reduction"
    TEMP_BAN = "temp_ban"
    PERMANENT_BAN = "permanent_ban"


class Violation(Base):
    """Append-only record of a flagged content submission."""

    __tablename__ = "violations"

    violation_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    author_id = Column(Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    content_type = Column(String, nullable=False)
    violation_type = Column(SAEnum(ViolationType, name="violation_type", values_callable=enum_values), nullable=False)
    severity = Column(SAEnum(Severity, name="violation_severity", values_callable=enum_values), nullable=False)
    detected_by = Column(String, nullable=False, default="ai")
    ai_confidence = Column(Float)
    ai_reasoning = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    punishments = relationship("Punishment", back_populates="violation")


class Punishment(Base):
    """Punishment applied as a consequence of a violation."""

    __tablename__ = "punishments"

    punishment_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    violation_id = Column(Uuid, ForeignKey("violations.violation_id", ondelete="CASCADE"), nullable=False)
    punishment_type = Column(SAEnum(PunishmentType, name="punishment_type", values_callable=enum_values), nullable=False)
    credibility_penalty = Column(Float, nullable=False, default=0.0)
    ban_until = Column(DateTime)
    notes = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    violation = relationship("Violation", back_populates="punishments")
