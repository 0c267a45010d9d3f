"""Digital key endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import AccessCheck, DigitalKeyRead, UnlockRequest, UnlockResponse
from ...services import digital_key_service
from ...services.errors import TrustRuleViolation
from .deps import to_http

router = APIRouter(prefix="/keys", tags=["keys"])


@router.post(
    "/unlock",
    response_model=UnlockResponse,
    summary="Unlock a scope with its access code",
    responses={
        400: {"description": "Incorrect access code"},
        404: {"description": "Scope or user not found"},
    },
)
def unlock_scope(payload: UnlockRequest, db: Session = Depends(get_db)) -> UnlockResponse:
    """Present an access code; repeating it after success is a no-op.

    Example request body::

        {
            "user_id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
            "scope_id": "11111111-1111-1111-1111-111111111111",
            "access_code": "S3A"
        }
    """

    try:
        result = digital_key_service.unlock(
            db,
            user_id=payload.user_id,
            scope_id=payload.scope_id,
            access_code=payload.access_code,
        )
        db.commit()
        db.refresh(result.key)
        return UnlockResponse(
            granted=result.granted,
            already_held=result.already_held,
            message=result.message,
            key=DigitalKeyRead.model_validate(result.key),
        )
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc


@router.get("", response_model=List[DigitalKeyRead], summary="List a user's keys")
def list_keys(
    user_id: UUID = Query(..., description="Key holder"),
    db: Session = Depends(get_db),
) -> List[DigitalKeyRead]:
    return list(digital_key_service.list_keys(db, user_id=user_id))


@router.get("/check/{scope_id}", response_model=AccessCheck, summary="Check scope access")
def check_access(
    scope_id: UUID,
    user_id: UUID = Query(..., description="User to check"),
    db: Session = Depends(get_db),
) -> AccessCheck:
    return AccessCheck(has_access=digital_key_service.has_access(db, user_id=user_id, scope_id=scope_id))
