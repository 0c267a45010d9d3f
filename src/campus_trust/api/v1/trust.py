"""Reputation recompute and moderation policy endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import PunishmentQuery, PunishmentRead, ReputationRead
from ...services import moderation_service, reputation_service
from ...services.errors import TrustRuleViolation
from .deps import to_http

router = APIRouter(tags=["trust"])


@router.post("/reputation/{user_id}/calculate", response_model=ReputationRead, summary="Recompute reputation")
def calculate_reputation(user_id: UUID, db: Session = Depends(get_db)) -> ReputationRead:
    try:
        reputation = reputation_service.calculate_reputation(db, user_id=user_id)
        db.commit()
        return ReputationRead(user_id=user_id, reputation=reputation)
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc


@router.post("/moderation/punishment", response_model=PunishmentRead, summary="Preview a punishment decision")
def punishment_decision(payload: PunishmentQuery) -> PunishmentRead:
    """Evaluate the escalation policy without recording anything.

    Example request body::

        {
            "violation_type": "harassment",
            "severity": "medium",
            "prior_violation_count": 2
        }
    """

    decision = moderation_service.calculate_punishment(
        payload.violation_type,
        payload.severity,
        payload.prior_violation_count,
    )
    return PunishmentRead(
        punishment_type=decision.punishment_type,
        credibility_penalty=decision.credibility_penalty,
        ban_duration_hours=decision.ban_duration_hours,
    )
