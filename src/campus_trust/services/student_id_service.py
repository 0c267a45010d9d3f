"""Student ID issuer: one-time registration tickets and their race-safe claim."""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import AdminStudentId, User, UserRole
from ..utils.codes import random_code
from ..utils.datetime import utcnow
from .errors import ConflictError, NotFound, PermissionDenied, ValidationFailed

logger = logging.getLogger(__name__)

_NAME_SEPARATORS = re.compile(r"[.,\-]")


def display_name_from_username(username: str) -> str:
    """``jane.doe-smith`` becomes ``Jane Doe Smith``."""

    words = [word for word in _NAME_SEPARATORS.sub(" ", username).split(" ") if word]
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def find_ticket(session: Session, student_id: str) -> Optional[AdminStudentId]:
    stmt = select(AdminStudentId).where(AdminStudentId.student_id == student_id)
    return session.execute(stmt).scalar_one_or_none()


def find_ticket_by_username(session: Session, username: str) -> Optional[AdminStudentId]:
    stmt = select(AdminStudentId).where(func.lower(AdminStudentId.username) == username.lower())
    return session.execute(stmt).scalar_one_or_none()


def issue_student_id(
    session: Session,
    *,
    username: str,
    grade: int,
    class_name: str,
    admin_id: UUID,
) -> AdminStudentId:
    """Generate a random ticket code bound to ``username``, retrying on collision."""

    settings = get_settings()

    username = (username or "").strip()
    if not username:
        raise ValidationFailed("Username is required")
    if not settings.min_grade <= grade <= settings.max_grade:
        raise ValidationFailed(f"Grade must be between {settings.min_grade} and {settings.max_grade}")
    if not class_name or not class_name.strip():
        raise ValidationFailed("Class name is required")

    admin = session.get(User, admin_id)
    if admin is None or admin.role != UserRole.ADMIN:
        raise PermissionDenied("Only admins can issue student IDs")

    if find_ticket_by_username(session, username) is not None:
        raise ConflictError("A student ID has already been created for this username")

    for _ in range(settings.student_id_max_attempts):
        code = random_code(settings.student_id_length)
        if find_ticket(session, code) is not None:
            continue
        ticket = AdminStudentId(
            username=username,
            student_id=code,
            grade=grade,
            class_name=class_name.strip(),
            created_by_admin_id=admin.user_id,
        )
        try:
            with session.begin_nested():
                session.add(ticket)
                session.flush()
        except IntegrityError:
            if find_ticket_by_username(session, username) is not None:
                raise ConflictError(
                    "A student ID has already been created for this username", race_lost=True
                ) from None
            continue
        logger.info("student id issued for %s (grade %s, class %s)", username, grade, ticket.class_name)
        return ticket

    raise ConflictError("Could not generate a unique student ID; please try again")


def claim_student_id(
    session: Session,
    *,
    student_id: str,
    username: str,
    email: Optional[str] = None,
) -> User:
    """Create the student account bound to a ticket and mark the ticket used.

    The ticket row is locked for the rest of the transaction. The assignment
    update only matches while ``is_assigned`` is still false, so a claim that
    slips past the lock still cannot succeed twice. Any raise here must be
    followed by a rollback, which discards the new user row as well.
    """

    stmt = select(AdminStudentId).where(AdminStudentId.student_id == student_id).with_for_update()
    ticket = session.execute(stmt).scalar_one_or_none()
    if ticket is None:
        raise NotFound("Invalid student ID. This ID was not generated by an administrator.")

    if ticket.is_assigned:
        raise ConflictError("This student ID has already been used")

    if ticket.username.lower() != (username or "").lower():
        raise ValidationFailed("Username does not match the assigned student ID")

    user = User(
        username=username,
        email=email,
        name=display_name_from_username(username),
        student_code=ticket.student_id,
        role=UserRole.STUDENT,
        grade=ticket.grade,
        class_name=ticket.class_name,
        credibility_score=get_settings().default_credibility,
    )
    try:
        with session.begin_nested():
            session.add(user)
            session.flush()
    except IntegrityError as exc:
        raise ConflictError("An account with this username or email already exists") from exc

    _mark_assigned(session, ticket_id=ticket.ticket_id, user_id=user.user_id)

    logger.info("student id claimed by %s", user.username)
    return user


def _mark_assigned(session: Session, *, ticket_id: UUID, user_id: UUID) -> None:
    result = session.execute(
        update(AdminStudentId)
        .where(AdminStudentId.ticket_id == ticket_id, AdminStudentId.is_assigned.is_(False))
        .values(is_assigned=True, assigned_to_user_id=user_id, assigned_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        logger.warning("student id %s was claimed concurrently", ticket_id)
        raise ConflictError(
            "Failed to assign student ID - it may have been used concurrently",
            race_lost=True,
        )


def list_student_ids(session: Session) -> Sequence[AdminStudentId]:
    stmt = select(AdminStudentId).order_by(AdminStudentId.created_at.desc())
    return session.execute(stmt).scalars().all()


def delete_student_id(session: Session, *, ticket_id: UUID) -> None:
    """Remove an unassigned ticket; assigned tickets are kept as registration history."""

    ticket = session.get(AdminStudentId, ticket_id)
    if ticket is None:
        raise NotFound("Student ID not found")
    if ticket.is_assigned:
        raise ConflictError("Cannot delete a student ID that has already been assigned")
    session.delete(ticket)
    session.flush()
