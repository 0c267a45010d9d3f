"""Digital key model: a permanent per-user unlock of a scope."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class DigitalKey(Base):
    """Proof that a user once presented the scope's access code."""

    __tablename__ = "digital_keys"
    __table_args__ = (
        UniqueConstraint("user_id", "scope_id", name="digital_keys_user_scope_unique"),
    )

    key_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    scope_id = Column(Uuid, ForeignKey("scopes.scope_id", ondelete="RESTRICT"), nullable=False)
    unlocked_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="digital_keys")
    scope = relationship("Scope", back_populates="digital_keys")
