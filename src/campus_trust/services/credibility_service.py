"""Credibility engine: peer accuracy ratings, derived trust score and account status."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import AccountStatus, Post, PostAccuracyRating, User, UserRole
from ..utils.datetime import utcnow
from .errors import NotFound, PermissionDenied, ValidationFailed

logger = logging.getLogger(__name__)

STAR_TO_SCORE = 20.0
MIN_RATING = 1
MAX_RATING = 5


@dataclass
class RatingOutcome:
    rating: PostAccuracyRating
    author: User
    author_credibility: float


def credibility_from_ratings(ratings_sum: int, ratings_count: int, default: Optional[float] = None) -> float:
    """Map the mean of 1-5 star ratings onto 0-100; neutral when unrated."""

    if ratings_count == 0:
        return get_settings().default_credibility if default is None else default
    return (ratings_sum / ratings_count) * STAR_TO_SCORE


def next_account_status(current: AccountStatus, score: float, threshold: float) -> AccountStatus:
    """Two-state hysteresis between active and threatened.

    Suspended accounts are left alone; only a permanent ban puts them there.
    """

    if current == AccountStatus.SUSPENDED:
        return current
    if score < threshold:
        return AccountStatus.THREATENED
    if current == AccountStatus.THREATENED:
        return AccountStatus.ACTIVE
    return current


def refresh_account_status(session: Session, user: User) -> AccountStatus:
    threshold = get_settings().credibility_threat_threshold
    new_status = next_account_status(user.account_status, user.credibility_score, threshold)
    if new_status != user.account_status:
        logger.info(
            "account status for %s: %s -> %s (credibility %.2f)",
            user.username,
            user.account_status.value,
            new_status.value,
            user.credibility_score,
        )
        user.account_status = new_status
        user.updated_at = utcnow()
    return user.account_status


def update_credibility(session: Session, *, user_id: UUID, score: float) -> User:
    """Overwrite the user's credibility and re-run the status transition."""

    user = session.get(User, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    user.credibility_score = score
    user.updated_at = utcnow()
    refresh_account_status(session, user)
    session.flush()
    return user


def _rating_totals(session: Session, *criteria) -> tuple[int, int]:
    stmt = (
        select(func.coalesce(func.sum(PostAccuracyRating.rating), 0), func.count(PostAccuracyRating.rating_id))
        .select_from(PostAccuracyRating)
        .join(Post, Post.post_id == PostAccuracyRating.post_id)
        .where(*criteria)
    )
    total, count = session.execute(stmt).one()
    return int(total), int(count)


def recompute_post_rating(session: Session, post: Post) -> float:
    total, count = _rating_totals(session, Post.post_id == post.post_id)
    post.credibility_rating = credibility_from_ratings(total, count)
    post.updated_at = utcnow()
    return post.credibility_rating


def recompute_author_credibility(session: Session, *, author_id: UUID) -> User:
    """Derive the author's credibility from every rating on every one of their posts."""

    total, count = _rating_totals(session, Post.author_id == author_id)
    return update_credibility(session, user_id=author_id, score=credibility_from_ratings(total, count))


def _upsert_rating(session: Session, post_id: UUID, user_id: UUID, rating: int) -> PostAccuracyRating:
    stmt = select(PostAccuracyRating).where(
        PostAccuracyRating.post_id == post_id,
        PostAccuracyRating.user_id == user_id,
    )
    existing = session.execute(stmt).scalar_one_or_none()
    if existing is not None:
        existing.rating = rating
        existing.updated_at = utcnow()
        session.flush()
        return existing

    record = PostAccuracyRating(post_id=post_id, user_id=user_id, rating=rating)
    try:
        with session.begin_nested():
            session.add(record)
            session.flush()
    except IntegrityError:
        # Another request inserted the same (post, rater) pair first; overwrite it.
        existing = session.execute(stmt).scalar_one()
        existing.rating = rating
        existing.updated_at = utcnow()
        session.flush()
        return existing
    return record


def rate_post_accuracy(session: Session, *, post_id: UUID, user_id: UUID, rating: int) -> RatingOutcome:
    """Store one rater's vote on a post and recompute the author's credibility."""

    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationFailed("Rating must be an integer between 1 and 5")

    post = session.get(Post, post_id)
    if post is None:
        raise NotFound(f"Post {post_id} not found")
    rater = session.get(User, user_id)
    if rater is None:
        raise NotFound(f"User {user_id} not found")
    if rater.role == UserRole.VISITOR:
        raise PermissionDenied("Visitors cannot rate posts")

    record = _upsert_rating(session, post.post_id, user_id, rating)
    recompute_post_rating(session, post)
    author = recompute_author_credibility(session, author_id=post.author_id)

    return RatingOutcome(rating=record, author=author, author_credibility=author.credibility_score)
