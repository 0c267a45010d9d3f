"""Moderation escalation: punishment policy, violation history and enforcement."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import AccountStatus, Punishment, PunishmentType, Severity, User, Violation, ViolationType
from ..utils.datetime import hours_from, utcnow
from .credibility_service import refresh_account_status
from .errors import NotFound, ServiceUnavailable

logger = logging.getLogger(__name__)

BASE_PENALTY = {
    ViolationType.SPAM: 2,
    ViolationType.OFFENSIVE: 5,
    ViolationType.HATE_SPEECH: 15,
    ViolationType.HARASSMENT: 10,
    ViolationType.INAPPROPRIATE: 8,
}
DEFAULT_BASE_PENALTY = 5

SEVERITY_MULTIPLIER = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 5,
}
DEFAULT_SEVERITY_MULTIPLIER = 1

REPEAT_OFFENSE_FACTOR = 0.2

FAIL_OPEN_REASONING = "Moderation service error - content allowed by default"


@dataclass(frozen=True)
class PunishmentDecision:
    punishment_type: PunishmentType
    credibility_penalty: float
    ban_duration_hours: Optional[int] = None


@dataclass(frozen=True)
class ModerationVerdict:
    """What the external classifier said about one piece of content."""

    is_violation: bool
    violation_type: Optional[ViolationType] = None
    severity: Optional[Severity] = None
    confidence: float = 0.0
    reasoning: str = ""

    @property
    def actionable(self) -> bool:
        return self.is_violation and self.violation_type is not None and self.severity is not None


ContentClassifier = Callable[[str, str], ModerationVerdict]


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def calculate_punishment(violation_type, severity, prior_violation_count: int) -> PunishmentDecision:
    """Map a verdict and the offender's history onto a punishment.

    Pure policy: nothing is written here. Unknown types and severities fall
    back to a base penalty of 5 and a multiplier of 1.
    """

    vtype = _coerce(ViolationType, violation_type)
    level = _coerce(Severity, severity)
    priors = max(0, int(prior_violation_count))

    base = BASE_PENALTY.get(vtype, DEFAULT_BASE_PENALTY)
    multiplier = SEVERITY_MULTIPLIER.get(level, DEFAULT_SEVERITY_MULTIPLIER)
    penalty = base * multiplier * (1 + priors * REPEAT_OFFENSE_FACTOR)

    if level == Severity.CRITICAL or priors >= 5:
        return PunishmentDecision(PunishmentType.PERMANENT_BAN, min(penalty, 50))

    if level == Severity.HIGH or priors >= 3:
        return PunishmentDecision(
            PunishmentType.TEMP_BAN,
            min(penalty, 30),
            ban_duration_hours=168 if level == Severity.HIGH else 72,
        )

    if penalty >= 10 or priors >= 2:
        return PunishmentDecision(PunishmentType.CREDIBILITY_REDUCTION, min(penalty, 20))

    return PunishmentDecision(PunishmentType.WARNING, min(penalty, 5))


def classify_content(classifier: Optional[ContentClassifier], content: str, content_type: str) -> ModerationVerdict:
    """Run the external classifier under the fail-open policy.

    A classifier error lets the content through unless fail-open has been
    switched off in settings, in which case the submission is refused.
    """

    if classifier is None:
        return ModerationVerdict(is_violation=False, reasoning="No classifier configured")
    try:
        return classifier(content, content_type)
    except Exception as exc:
        if not get_settings().moderation_fail_open:
            logger.error("moderation classifier failed for %s; rejecting (fail-closed)", content_type)
            raise ServiceUnavailable("Content moderation is unavailable; please try again later") from exc
        logger.warning("moderation classifier failed for %s; allowing content (fail-open): %s", content_type, exc)
        return ModerationVerdict(is_violation=False, confidence=0.0, reasoning=FAIL_OPEN_REASONING)


def violation_count(session: Session, *, user_id: UUID) -> int:
    stmt = select(func.count(Violation.violation_id)).where(Violation.author_id == user_id)
    return session.execute(stmt).scalar_one()


def record_violation(
    session: Session,
    *,
    user_id: UUID,
    content_type: str,
    verdict: ModerationVerdict,
    detected_by: str = "ai",
) -> Violation:
    violation = Violation(
        author_id=user_id,
        content_type=content_type,
        violation_type=verdict.violation_type,
        severity=verdict.severity,
        detected_by=detected_by,
        ai_confidence=verdict.confidence,
        ai_reasoning=verdict.reasoning,
    )
    session.add(violation)
    session.flush()
    return violation


def apply_punishment(session: Session, *, user: User, decision: PunishmentDecision) -> User:
    """Apply a decision to the user: credibility penalty, ban window, status."""

    now = utcnow()
    user.credibility_score = max(0.0, user.credibility_score - decision.credibility_penalty)
    if decision.punishment_type == PunishmentType.PERMANENT_BAN:
        user.account_status = AccountStatus.SUSPENDED
        user.ban_until = None
    elif decision.ban_duration_hours:
        user.ban_until = hours_from(now, decision.ban_duration_hours)
    user.updated_at = now
    refresh_account_status(session, user)
    session.flush()
    return user


def enforce(session: Session, *, user_id: UUID, verdict: ModerationVerdict, content_type: str) -> PunishmentDecision:
    """Record a flagged submission and punish its author.

    The prior count excludes the violation being recorded now.
    """

    user = session.get(User, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")

    priors = violation_count(session, user_id=user_id)
    violation = record_violation(session, user_id=user_id, content_type=content_type, verdict=verdict)
    decision = calculate_punishment(verdict.violation_type, verdict.severity, priors)

    punishment = Punishment(
        user_id=user_id,
        violation_id=violation.violation_id,
        punishment_type=decision.punishment_type,
        credibility_penalty=decision.credibility_penalty,
        ban_until=hours_from(utcnow(), decision.ban_duration_hours) if decision.ban_duration_hours else None,
        notes=f"AI detected {verdict.violation_type.value} ({verdict.severity.value}) in {content_type}",
    )
    session.add(punishment)
    apply_punishment(session, user=user, decision=decision)

    logger.info(
        "punishment applied to %s: %s (penalty %.2f, priors %s)",
        user.username,
        decision.punishment_type.value,
        decision.credibility_penalty,
        priors,
    )
    return decision


def is_banned(user: User) -> bool:
    if user.account_status == AccountStatus.SUSPENDED:
        return True
    return user.ban_until is not None and user.ban_until > utcnow()
