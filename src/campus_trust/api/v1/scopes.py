"""Scope registry endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import Message, ScopeAdminRead, ScopeCreate, ScopeRead
from ...services import scope_service, succession_service
from ...services.errors import TrustRuleViolation
from .deps import to_http

router = APIRouter(prefix="/scopes", tags=["scopes"])


@router.get("", response_model=List[ScopeRead], summary="List scopes")
def list_scopes(db: Session = Depends(get_db)) -> List[ScopeRead]:
    """Return all scopes without their access codes."""

    return list(scope_service.list_scopes(db))


@router.get(
    "/{scope_id}",
    response_model=ScopeRead,
    summary="Get a scope",
    responses={404: {"description": "Scope not found"}},
)
def get_scope(scope_id: UUID, db: Session = Depends(get_db)) -> ScopeRead:
    try:
        return scope_service.get_scope(db, scope_id)
    except TrustRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "",
    response_model=ScopeAdminRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a scope",
    responses={
        400: {"description": "Malformed scope or missing parent grade"},
        403: {"description": "Caller is not an admin"},
        409: {"description": "Scope already exists"},
    },
)
def create_scope(payload: ScopeCreate, db: Session = Depends(get_db)) -> ScopeAdminRead:
    """Create a public, grade or section scope (admin only).

    Example request body::

        {
            "actor_id": "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa",
            "kind": "section",
            "section_name": "3-A",
            "access_code": "S3A"
        }
    """

    try:
        succession_service.ensure_admin(db, user_id=payload.actor_id)
        scope = scope_service.create_scope(
            db,
            kind=payload.kind,
            name=payload.name,
            access_code=payload.access_code,
            grade_number=payload.grade_number,
            section_name=payload.section_name,
        )
        db.commit()
        db.refresh(scope)
        return scope
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc


@router.delete(
    "/{scope_id}",
    response_model=Message,
    summary="Delete a scope",
    responses={409: {"description": "Sections, keys or content still reference the scope"}},
)
def delete_scope(
    scope_id: UUID,
    actor_id: UUID = Query(..., description="Admin performing the deletion"),
    db: Session = Depends(get_db),
) -> Message:
    try:
        succession_service.ensure_admin(db, user_id=actor_id)
        scope_service.delete_scope(db, scope_id)
        db.commit()
        return Message(message="Scope deleted successfully")
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc
