"""Digital key store: verifying access codes and recording permanent unlocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import DigitalKey, User
from .errors import NotFound, PermissionDenied, ValidationFailed
from .scope_service import get_scope

logger = logging.getLogger(__name__)


@dataclass
class UnlockResult:
    granted: bool
    already_held: bool
    message: str
    key: DigitalKey


def _find_key(session: Session, user_id: UUID, scope_id: UUID) -> Optional[DigitalKey]:
    stmt = select(DigitalKey).where(DigitalKey.user_id == user_id, DigitalKey.scope_id == scope_id)
    return session.execute(stmt).scalar_one_or_none()


def unlock(session: Session, *, user_id: UUID, scope_id: UUID, access_code: str) -> UnlockResult:
    """Verify ``access_code`` and persist a key for (user, scope).

    An existing key short-circuits to success without looking at the code.
    A concurrent first-time unlock that loses the insert race against the
    unique constraint is reported as already held.
    """

    scope = get_scope(session, scope_id)
    if session.get(User, user_id) is None:
        raise NotFound(f"User {user_id} not found")

    existing = _find_key(session, user_id, scope.scope_id)
    if existing is not None:
        return UnlockResult(
            granted=True,
            already_held=True,
            message="You already have access to this scope",
            key=existing,
        )

    if scope.access_code is None:
        raise ValidationFailed("This scope is public and has no access code to unlock")

    if access_code != scope.access_code:
        raise ValidationFailed("Incorrect access code")

    key = DigitalKey(user_id=user_id, scope_id=scope.scope_id)
    try:
        with session.begin_nested():
            session.add(key)
            session.flush()
    except IntegrityError:
        logger.warning("concurrent unlock for user %s on scope %s; reusing existing key", user_id, scope_id)
        winner = _find_key(session, user_id, scope.scope_id)
        if winner is None:
            raise
        return UnlockResult(
            granted=True,
            already_held=True,
            message="You already have access to this scope",
            key=winner,
        )

    logger.info("digital key granted: user %s scope %s", user_id, scope.name)
    return UnlockResult(
        granted=True,
        already_held=False,
        message="Access granted! Digital key saved to your profile.",
        key=key,
    )


def has_access(session: Session, *, user_id: UUID, scope_id: UUID) -> bool:
    """Return whether the user holds a key for the scope."""

    return _find_key(session, user_id, scope_id) is not None


def require_access(session: Session, *, user_id: UUID, scope_id: Optional[UUID], action: str) -> None:
    """Authorization gate for content written into a non-public scope."""

    if scope_id is None:
        return
    scope = get_scope(session, scope_id)
    if scope.access_code is None:
        return
    if not has_access(session, user_id=user_id, scope_id=scope.scope_id):
        raise PermissionDenied(
            f"You don't have access to {action} in this scope. Please enter the access code first."
        )


def list_keys(session: Session, *, user_id: UUID) -> Sequence[DigitalKey]:
    stmt = select(DigitalKey).where(DigitalKey.user_id == user_id).order_by(DigitalKey.unlocked_at.desc())
    return session.execute(stmt).scalars().all()
