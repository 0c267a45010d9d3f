"""Admin succession and student ID endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import (
    HandoverRequest,
    HandoverResponse,
    Message,
    PromotionRequest,
    PromotionResponse,
    StudentIdCreate,
    StudentIdRead,
    SuccessionRead,
    UserSummary,
)
from ...services import student_id_service, succession_service
from ...services.errors import TrustRuleViolation
from .deps import to_http

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/handover",
    response_model=HandoverResponse,
    summary="Hand admin privileges to a successor",
    responses={
        403: {"description": "Caller is not an admin"},
        404: {"description": "Successor not found"},
        409: {"description": "Self-transfer"},
    },
)
def handover(payload: HandoverRequest, db: Session = Depends(get_db)) -> HandoverResponse:
    """Demote the caller to student and promote the successor atomically.

    Example request body::

        {
            "current_admin_id": "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa",
            "successor_id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
            "notes": "End of term handover"
        }
    """

    try:
        record = succession_service.transfer_admin(
            db,
            current_admin_id=payload.current_admin_id,
            successor_id=payload.successor_id,
            notes=payload.notes,
        )
        db.commit()
        db.refresh(record)
        return HandoverResponse(
            success=True,
            message="Admin privileges successfully transferred. You are now a student.",
            record=SuccessionRead.model_validate(record),
        )
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc


@router.post(
    "/promote",
    response_model=PromotionResponse,
    summary="Promote another user to admin",
    responses={409: {"description": "Target is already an admin, or self-promotion"}},
)
def promote(payload: PromotionRequest, db: Session = Depends(get_db)) -> PromotionResponse:
    try:
        result = succession_service.promote_to_admin(
            db,
            current_admin_id=payload.current_admin_id,
            user_id=payload.user_id,
        )
        db.commit()
        db.refresh(result.user)
        return PromotionResponse(
            success=result.success,
            message=result.message,
            user=UserSummary.model_validate(result.user),
        )
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc


@router.get("/succession-history", response_model=List[SuccessionRead], summary="Admin handover history")
def succession_history(
    actor_id: UUID = Query(..., description="Admin requesting the history"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[SuccessionRead]:
    try:
        succession_service.ensure_admin(db, user_id=actor_id)
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc
    return list(succession_service.succession_history(db, limit=limit, offset=offset))


@router.post(
    "/student-ids",
    response_model=StudentIdRead,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a one-time student ID",
    responses={409: {"description": "Username already has a ticket"}},
)
def issue_student_id(payload: StudentIdCreate, db: Session = Depends(get_db)) -> StudentIdRead:
    try:
        ticket = student_id_service.issue_student_id(
            db,
            username=payload.username,
            grade=payload.grade,
            class_name=payload.class_name,
            admin_id=payload.admin_id,
        )
        db.commit()
        db.refresh(ticket)
        return ticket
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc


@router.get("/student-ids", response_model=List[StudentIdRead], summary="List issued student IDs")
def list_student_ids(
    actor_id: UUID = Query(..., description="Admin requesting the list"),
    db: Session = Depends(get_db),
) -> List[StudentIdRead]:
    try:
        succession_service.ensure_admin(db, user_id=actor_id)
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc
    return list(student_id_service.list_student_ids(db))


@router.delete("/student-ids/{ticket_id}", response_model=Message, summary="Delete an unassigned student ID")
def delete_student_id(
    ticket_id: UUID,
    actor_id: UUID = Query(..., description="Admin performing the deletion"),
    db: Session = Depends(get_db),
) -> Message:
    try:
        succession_service.ensure_admin(db, user_id=actor_id)
        student_id_service.delete_student_id(db, ticket_id=ticket_id)
        db.commit()
        return Message(message="Student ID deleted successfully")
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc
