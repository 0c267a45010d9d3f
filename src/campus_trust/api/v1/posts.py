"""Post creation and accuracy rating endpoints."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import AccuracyRatingCreate, AccuracyRatingResponse, PostCreate, PostRead
from ...services import content_service, credibility_service
from ...services.content_service import ContentRejected
from ...services.errors import TrustRuleViolation
from ...services.moderation_service import ContentClassifier
from .deps import get_classifier, to_http

router = APIRouter(prefix="/posts", tags=["posts"])


def rejection_response(db: Session, exc: ContentRejected) -> HTTPException:
    """Keep the recorded violation and punishment, then report the block."""

    db.commit()
    return HTTPException(
        status_code=exc.status_code,
        detail={
            "message": exc.detail,
            "punishment": exc.decision.punishment_type.value,
            "credibility_lost": exc.decision.credibility_penalty,
        },
    )


@router.post(
    "",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    responses={
        400: {"description": "Empty content or blocked by moderation"},
        403: {"description": "Caller lacks the scope key or is banned"},
    },
)
def create_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    classifier: Optional[ContentClassifier] = Depends(get_classifier),
) -> PostRead:
    try:
        post = content_service.create_post(
            db,
            author_id=payload.author_id,
            content=payload.content,
            scope_id=payload.scope_id,
            classifier=classifier,
        )
        db.commit()
        db.refresh(post)
        return post
    except ContentRejected as exc:
        raise rejection_response(db, exc) from exc
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc


@router.post(
    "/{post_id}/rate-accuracy",
    response_model=AccuracyRatingResponse,
    summary="Rate a post's accuracy",
    responses={
        400: {"description": "Rating outside 1-5"},
        403: {"description": "Visitors cannot rate"},
        404: {"description": "Post not found"},
    },
)
def rate_accuracy(
    post_id: UUID,
    payload: AccuracyRatingCreate,
    db: Session = Depends(get_db),
) -> AccuracyRatingResponse:
    """Record or replace the caller's 1-5 star vote and refresh the author's credibility.

    Example request body::

        {
            "user_id": "cccccccc-cccc-cccc-cccc-cccccccccccc",
            "rating": 4
        }
    """

    try:
        outcome = credibility_service.rate_post_accuracy(
            db,
            post_id=post_id,
            user_id=payload.user_id,
            rating=payload.rating,
        )
        db.commit()
        db.refresh(outcome.rating)
        db.refresh(outcome.rating.post)
        return AccuracyRatingResponse(
            success=True,
            rating=outcome.rating.rating,
            post_credibility=outcome.rating.post.credibility_rating,
            author_credibility=outcome.author_credibility,
        )
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc
