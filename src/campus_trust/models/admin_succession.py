"""Admin succession audit model."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class AdminSuccession(Base):
    """Immutable record of one admin handover."""

    __tablename__ = "admin_successions"

    succession_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    previous_admin_id = Column(Uuid, ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False)
    new_admin_id = Column(Uuid, ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False)
    notes = Column(String)
    handover_date = Column(DateTime, default=utcnow, nullable=False)

    previous_admin = relationship("User", foreign_keys=[previous_admin_id])
    new_admin = relationship("User", foreign_keys=[new_admin_id])
