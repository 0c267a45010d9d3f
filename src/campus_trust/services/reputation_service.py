"""Reputation engine: activity and participation score recomputed from source rows."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import EventRsvp, Post, User
from ..utils.datetime import utcnow
from .errors import NotFound

logger = logging.getLogger(__name__)

ACTIVITY_WEIGHT = 2.0
CREDIBILITY_WEIGHT = 1.5
PARTICIPATION_WEIGHT = 3.0


def reputation_formula(post_count: int, avg_post_credibility: float, events_attended: int) -> float:
    return (
        ACTIVITY_WEIGHT * post_count
        + CREDIBILITY_WEIGHT * avg_post_credibility
        + PARTICIPATION_WEIGHT * events_attended
    )


def calculate_reputation(session: Session, *, user_id: UUID) -> float:
    """Recompute and store the user's reputation from posts and RSVPs.

    With no posts the user's own credibility stands in for the average.
    """

    user = session.get(User, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")

    post_stats = session.execute(
        select(func.count(Post.post_id), func.avg(Post.credibility_rating)).where(Post.author_id == user_id)
    ).one()
    post_count = post_stats[0] or 0
    avg_post_credibility = float(post_stats[1]) if post_count else float(user.credibility_score)

    events_attended = session.execute(
        select(func.count(EventRsvp.rsvp_id)).where(EventRsvp.user_id == user_id)
    ).scalar_one()

    reputation = reputation_formula(post_count, avg_post_credibility, events_attended)

    user.reputation_score = reputation
    user.updated_at = utcnow()
    session.flush()

    logger.debug(
        "reputation for %s: posts=%s avg_credibility=%.2f events=%s -> %.2f",
        user_id,
        post_count,
        avg_post_credibility,
        events_attended,
        reputation,
    )
    return reputation
