"""Scope model: the public / grade / section access boundaries."""

import enum
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum, Index, Integer, String, UniqueConstraint, Uuid, text
from sqlalchemy.orm import relationship

from ..core.database import Base, enum_values
from ..utils.datetime import utcnow


class ScopeKind(str, enum.Enum):
    """Tier of the access hierarchy."""

    PUBLIC = "public"
    GRADE = "grade"
    SECTION = "section"


class Scope(Base):
    """Named access boundary that posts, events and schedules are filed under."""

    __tablename__ = "scopes"
    __table_args__ = (
        UniqueConstraint("access_code", name="scopes_access_code_unique"),
        UniqueConstraint("kind", "grade_number", name="scopes_grade_number_unique"),
        UniqueConstraint("section_name", name="scopes_section_name_unique"),
        CheckConstraint(
            "(kind = 'public' AND access_code IS NULL) OR (kind <> 'public' AND access_code IS NOT NULL)",
            name="scopes_access_code_shape",
        ),
        CheckConstraint(
            "(kind = 'section') = (parent_grade_number IS NOT NULL)",
            name="scopes_section_parent_shape",
        ),
        Index(
            "scopes_single_public",
            "kind",
            unique=True,
            postgresql_where=text("kind = 'public'"),
            sqlite_where=text("kind = 'public'"),
        ),
    )

    scope_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    kind = Column(SAEnum(ScopeKind, name="scope_kind", values_callable=enum_values), nullable=False)
    grade_number = Column(Integer)
    section_name = Column(String)
    parent_grade_number = Column(Integer)
    access_code = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    digital_keys = relationship("DigitalKey", back_populates="scope")

