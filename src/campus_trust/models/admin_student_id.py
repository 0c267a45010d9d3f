"""One-time registration tickets issued by admins."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class AdminStudentId(Base):
    """Binds a username to a grade and class until it is claimed at registration."""

    __tablename__ = "admin_student_ids"
    __table_args__ = (
        UniqueConstraint("username", name="admin_student_ids_username_unique"),
        UniqueConstraint("student_id", name="admin_student_ids_student_id_unique"),
    )

    ticket_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String, nullable=False)
    student_id = Column(String, nullable=False)
    grade = Column(Integer, nullable=False)
    class_name = Column(String, nullable=False)
    is_assigned = Column(Boolean, nullable=False, default=False)
    assigned_to_user_id = Column(Uuid, ForeignKey("users.user_id", ondelete="RESTRICT"))
    created_by_admin_id = Column(Uuid, ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    assigned_at = Column(DateTime)

    assigned_to = relationship("User", foreign_keys=[assigned_to_user_id])
    created_by = relationship("User", foreign_keys=[created_by_admin_id])


Index(
    "admin_student_ids_username_lower_unique",
    func.lower(AdminStudentId.username),
    unique=True,
)
