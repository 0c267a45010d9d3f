"""User model carrying the trust-relevant fields."""

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum as SAEnum, Float, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base, enum_values
from ..utils.datetime import utcnow


class UserRole(str, enum.Enum):
    """Roles a community member can hold."""

    STUDENT = "student"
    ADMIN = "admin"
    TEACHER = "teacher"
    ALUMNI = "alumni"
    VISITOR = "visitor"


class AccountStatus(str, enum.Enum):
    """Account standing derived from credibility and punishments."""

    ACTIVE = "active"
    THREATENED = "threatened"
    SUSPENDED = "suspended"


class User(Base):
    """Represents a member of the school community."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="users_username_unique"),
        UniqueConstraint("email", name="users_email_unique"),
        UniqueConstraint("student_code", name="users_student_code_unique"),
    )

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String, nullable=False)
    email = Column(String)
    name = Column(String, nullable=False)
    student_code = Column(String)
    role = Column(
        SAEnum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.STUDENT,
    )
    grade = Column(Integer)
    class_name = Column(String)

    credibility_score = Column(Float, nullable=False, default=50.0)
    reputation_score = Column(Float, nullable=False, default=0.0)
    account_status = Column(
        SAEnum(AccountStatus, name="account_status", values_callable=enum_values),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )
    ban_until = Column(DateTime)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    posts = relationship("Post", back_populates="author")
    digital_keys = relationship("DigitalKey", back_populates="user")
    rsvps = relationship("EventRsvp", back_populates="user")
