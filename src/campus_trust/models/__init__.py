"""SQLAlchemy models for the campus trust engine."""

from .admin_student_id import AdminStudentId
from .admin_succession import AdminSuccession
from .digital_key import DigitalKey
from .event import Event, EventRsvp, EventType
from .post import Post, PostAccuracyRating
from .schedule import Schedule
from .scope import Scope, ScopeKind
from .user import AccountStatus, User, UserRole
from .violation import Punishment, PunishmentType, Severity, Violation, ViolationType

__all__ = [
    "AccountStatus",
    "AdminStudentId",
    "AdminSuccession",
    "DigitalKey",
    "Event",
    "EventRsvp",
    "EventType",
    "Post",
    "PostAccuracyRating",
    "Punishment",
    "PunishmentType",
    "Schedule",
    "Scope",
    "ScopeKind",
    "Severity",
    "User",
    "UserRole",
    "Violation",
    "ViolationType",
]
