"""Shared dependencies for the v1 routers."""

from typing import Optional

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session

from ...services.errors import DependencyBlocked, TrustRuleViolation
from ...services.moderation_service import ContentClassifier


def get_classifier(request: Request) -> Optional[ContentClassifier]:
    """Return the moderation classifier installed on the app, if any."""

    return getattr(request.app.state, "content_classifier", None)


def to_http(db: Session, exc: TrustRuleViolation) -> HTTPException:
    """Roll back the request's transaction and translate the service error."""

    db.rollback()
    detail: object = exc.detail
    if isinstance(exc, DependencyBlocked):
        detail = {"message": exc.detail, "category": exc.category, "count": exc.count}
    return HTTPException(status_code=exc.status_code, detail=detail)
