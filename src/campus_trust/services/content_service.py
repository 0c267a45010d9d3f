"""Scope-gated content writers that feed the reputation and moderation engines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import Event, EventRsvp, EventType, Post, Schedule, ScopeKind, User, UserRole
from ..utils.datetime import utcnow
from . import digital_key_service, moderation_service, reputation_service
from .errors import ConflictError, NotFound, PermissionDenied, ValidationFailed
from .moderation_service import ContentClassifier, PunishmentDecision
from .scope_service import get_scope

logger = logging.getLogger(__name__)


class ContentRejected(ValidationFailed):
    """Submission blocked by moderation; carries the punishment that was applied."""

    def __init__(self, detail: str, decision: PunishmentDecision) -> None:
        super().__init__(detail)
        self.decision = decision


@dataclass
class RsvpToggle:
    attending: bool
    reputation: float
    rsvp: Optional[EventRsvp] = None


def _active_author(session: Session, user_id: UUID) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    if user.role == UserRole.VISITOR:
        raise PermissionDenied("Visitors cannot create content")
    if moderation_service.is_banned(user):
        raise PermissionDenied("Your account is currently banned from posting")
    return user


def _moderate(
    session: Session,
    *,
    author: User,
    text: str,
    content_type: str,
    classifier: Optional[ContentClassifier],
) -> None:
    if not text or not text.strip():
        return
    verdict = moderation_service.classify_content(classifier, text, content_type)
    if not verdict.actionable:
        return
    decision = moderation_service.enforce(
        session,
        user_id=author.user_id,
        verdict=verdict,
        content_type=content_type,
    )
    raise ContentRejected(f"Content blocked: {verdict.reasoning}", decision)


def create_post(
    session: Session,
    *,
    author_id: UUID,
    content: str,
    scope_id: Optional[UUID] = None,
    classifier: Optional[ContentClassifier] = None,
) -> Post:
    """Create a post after the scope gate and moderation, then refresh reputation.

    A rejected post still leaves its violation and punishment flushed; the
    caller should commit those before reporting the rejection.
    """

    author = _active_author(session, author_id)
    if not content or not content.strip():
        raise ValidationFailed("Post content is required")

    digital_key_service.require_access(session, user_id=author.user_id, scope_id=scope_id, action="post")
    _moderate(session, author=author, text=content, content_type="post", classifier=classifier)

    post = Post(
        author_id=author.user_id,
        scope_id=scope_id,
        content=content,
        credibility_rating=get_settings().default_credibility,
    )
    session.add(post)
    session.flush()

    reputation_service.calculate_reputation(session, user_id=author.user_id)
    return post


def create_event(
    session: Session,
    *,
    creator_id: UUID,
    title: str,
    event_type: EventType,
    start_time: datetime,
    scope_id: Optional[UUID] = None,
    description: Optional[str] = None,
    end_time: Optional[datetime] = None,
    location: Optional[str] = None,
    classifier: Optional[ContentClassifier] = None,
) -> Event:
    creator = _active_author(session, creator_id)
    if not title or not title.strip():
        raise ValidationFailed("Event title is required")
    if end_time is not None and end_time < start_time:
        raise ValidationFailed("Event end time must not be before its start time")

    digital_key_service.require_access(session, user_id=creator.user_id, scope_id=scope_id, action="create events")
    _moderate(
        session,
        author=creator,
        text=" ".join(part for part in (title, description) if part),
        content_type="event",
        classifier=classifier,
    )

    event = Event(
        title=title,
        description=description,
        event_type=event_type,
        scope_id=scope_id,
        start_time=start_time,
        end_time=end_time,
        location=location,
        created_by_id=creator.user_id,
    )
    session.add(event)
    session.flush()
    return event


def toggle_rsvp(session: Session, *, event_id: UUID, user_id: UUID) -> RsvpToggle:
    """Add the user's RSVP, or remove it if present, then refresh reputation."""

    event = session.get(Event, event_id)
    if event is None:
        raise NotFound(f"Event {event_id} not found")
    if session.get(User, user_id) is None:
        raise NotFound(f"User {user_id} not found")

    existing = session.execute(
        select(EventRsvp).where(EventRsvp.event_id == event_id, EventRsvp.user_id == user_id)
    ).scalar_one_or_none()

    rsvp = None
    if existing is not None:
        session.delete(existing)
        session.flush()
        attending = False
    else:
        rsvp = EventRsvp(event_id=event_id, user_id=user_id)
        try:
            with session.begin_nested():
                session.add(rsvp)
                session.flush()
        except IntegrityError as exc:
            raise ConflictError("RSVP was already recorded by another request", race_lost=True) from exc
        attending = True

    reputation = reputation_service.calculate_reputation(session, user_id=user_id)
    return RsvpToggle(attending=attending, reputation=reputation, rsvp=rsvp)


def create_schedule(
    session: Session,
    *,
    actor_id: UUID,
    scope_id: UUID,
    day_of_week: int,
    period_number: int,
    subject: Optional[str] = None,
    teacher_name: Optional[str] = None,
) -> Schedule:
    """Create or overwrite one timetable slot of a section the actor holds a key for."""

    scope = get_scope(session, scope_id)
    if scope.kind != ScopeKind.SECTION:
        raise ValidationFailed("Schedules can only be attached to class sections")
    if not 1 <= day_of_week <= 7:
        raise ValidationFailed("Day of week must be between 1 and 7")
    if not 1 <= period_number <= 7:
        raise ValidationFailed("Period number must be between 1 and 7")

    _active_author(session, actor_id)
    if not digital_key_service.has_access(session, user_id=actor_id, scope_id=scope.scope_id):
        raise PermissionDenied("You need the section key to create/edit schedules")

    slot = session.execute(
        select(Schedule).where(
            Schedule.scope_id == scope.scope_id,
            Schedule.day_of_week == day_of_week,
            Schedule.period_number == period_number,
        )
    ).scalar_one_or_none()
    if slot is None:
        slot = Schedule(scope_id=scope.scope_id, day_of_week=day_of_week, period_number=period_number)
        session.add(slot)
    slot.subject = subject
    slot.teacher_name = teacher_name
    slot.updated_at = utcnow()
    session.flush()
    return slot
