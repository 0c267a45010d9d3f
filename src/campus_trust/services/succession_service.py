"""Admin succession ledger: handover and promotion of admin privileges."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..models import AdminSuccession, User, UserRole
from ..utils.datetime import utcnow
from .errors import ConflictError, NotFound, PermissionDenied

logger = logging.getLogger(__name__)


@dataclass
class PromotionResult:
    success: bool
    message: str
    user: User


def _locked_user(session: Session, user_id: UUID) -> Optional[User]:
    stmt = select(User).where(User.user_id == user_id).with_for_update()
    return session.execute(stmt).scalar_one_or_none()


def _require_admin(session: Session, user_id: UUID, detail: str) -> User:
    user = _locked_user(session, user_id)
    if user is None or user.role != UserRole.ADMIN:
        raise PermissionDenied(detail)
    return user


def transfer_admin(
    session: Session,
    *,
    current_admin_id: UUID,
    successor_id: UUID,
    notes: Optional[str] = None,
) -> AdminSuccession:
    """Hand the caller's admin role to ``successor_id`` and demote the caller.

    Both role rows are locked before either is written. The demotion, the
    promotion and the ledger row are flushed together; the caller commits
    them as one transaction or rolls all three back.
    """

    current_admin = _require_admin(session, current_admin_id, "Only admins can transfer privileges")

    if current_admin_id == successor_id:
        raise ConflictError("Cannot transfer privileges to yourself")

    successor = _locked_user(session, successor_id)
    if successor is None:
        raise NotFound("Successor not found")

    now = utcnow()
    demoted = session.execute(
        update(User)
        .where(User.user_id == current_admin.user_id, User.role == UserRole.ADMIN)
        .values(role=UserRole.STUDENT, updated_at=now)
        .execution_options(synchronize_session="fetch")
    )
    if demoted.rowcount != 1:
        raise ConflictError("Admin role changed during handover; please retry", race_lost=True)

    promoted = session.execute(
        update(User)
        .where(User.user_id == successor.user_id)
        .values(role=UserRole.ADMIN, updated_at=now)
        .execution_options(synchronize_session="fetch")
    )
    if promoted.rowcount != 1:
        raise ConflictError("Successor disappeared during handover; please retry", race_lost=True)

    succession = AdminSuccession(
        previous_admin_id=current_admin.user_id,
        new_admin_id=successor.user_id,
        notes=notes or f"Admin privileges transferred from {current_admin.name} to {successor.name}",
        handover_date=now,
    )
    session.add(succession)
    session.flush()

    logger.info("admin handover: %s -> %s", current_admin.username, successor.username)
    return succession


def promote_to_admin(session: Session, *, current_admin_id: UUID, user_id: UUID) -> PromotionResult:
    """Grant admin to another user without touching the caller's role.

    Promotions leave no ledger row; the audit trail is the log line below.
    """

    current_admin = _require_admin(session, current_admin_id, "Only admins can promote users")

    if current_admin_id == user_id:
        raise ConflictError("You are already an admin")

    target = _locked_user(session, user_id)
    if target is None:
        raise NotFound("User not found")
    if target.role == UserRole.ADMIN:
        raise ConflictError("User is already an admin")

    target.role = UserRole.ADMIN
    target.updated_at = utcnow()
    session.flush()

    logger.info("admin promotion: %s promoted %s", current_admin.username, target.username)
    return PromotionResult(success=True, message=f"Successfully promoted {target.name} to admin", user=target)


def succession_history(session: Session, *, limit: int = 100, offset: int = 0) -> Sequence[AdminSuccession]:
    stmt = (
        select(AdminSuccession)
        .order_by(AdminSuccession.handover_date.desc())
        .offset(offset)
        .limit(limit)
    )
    return session.execute(stmt).scalars().all()


def ensure_admin(session: Session, *, user_id: UUID) -> User:
    """Gate for admin-only operations outside the ledger itself."""

    user = session.get(User, user_id)
    if user is None or user.role != UserRole.ADMIN:
        raise PermissionDenied("Admin privileges required")
    return user
