"""Registration endpoint: claiming an admin-issued student ID."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import RegistrationClaim, UserSummary
from ...services import student_id_service
from ...services.errors import TrustRuleViolation
from .deps import to_http

router = APIRouter(prefix="/registrations", tags=["registrations"])


@router.post(
    "",
    response_model=UserSummary,
    status_code=status.HTTP_201_CREATED,
    summary="Register with a student ID",
    responses={
        400: {"description": "Username does not match the ticket"},
        404: {"description": "Unknown student ID"},
        409: {"description": "Student ID already used"},
    },
)
def claim(payload: RegistrationClaim, db: Session = Depends(get_db)) -> UserSummary:
    """Create the student account bound to the ticket.

    Example request body::

        {
            "student_id": "K3J9Q2ZX",
            "username": "jane.doe"
        }
    """

    try:
        user = student_id_service.claim_student_id(
            db,
            student_id=payload.student_id,
            username=payload.username,
            email=payload.email,
        )
        db.commit()
        db.refresh(user)
        return user
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc
