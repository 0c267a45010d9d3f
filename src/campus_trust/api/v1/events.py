"""Event and RSVP endpoints."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import EventCreate, EventRead, RsvpRequest, RsvpResponse
from ...services import content_service
from ...services.content_service import ContentRejected
from ...services.errors import TrustRuleViolation
from ...services.moderation_service import ContentClassifier
from .deps import get_classifier, to_http
from .posts import rejection_response

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED, summary="Create an event")
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    classifier: Optional[ContentClassifier] = Depends(get_classifier),
) -> EventRead:
    try:
        event = content_service.create_event(
            db,
            creator_id=payload.creator_id,
            title=payload.title,
            event_type=payload.event_type,
            start_time=payload.start_time,
            end_time=payload.end_time,
            scope_id=payload.scope_id,
            description=payload.description,
            location=payload.location,
            classifier=classifier,
        )
        db.commit()
        db.refresh(event)
        return event
    except ContentRejected as exc:
        raise rejection_response(db, exc) from exc
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc


@router.post("/{event_id}/rsvp", response_model=RsvpResponse, summary="Toggle an RSVP")
def toggle_rsvp(event_id: UUID, payload: RsvpRequest, db: Session = Depends(get_db)) -> RsvpResponse:
    try:
        result = content_service.toggle_rsvp(db, event_id=event_id, user_id=payload.user_id)
        db.commit()
        return RsvpResponse(attending=result.attending, reputation=result.reputation)
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc
