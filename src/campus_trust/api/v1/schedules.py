"""Section timetable endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import ScheduleRead, ScheduleUpsert
from ...services import content_service
from ...services.errors import TrustRuleViolation
from .deps import to_http

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.put(
    "",
    response_model=ScheduleRead,
    summary="Set one timetable slot",
    responses={403: {"description": "Caller lacks the section key"}},
)
def upsert_schedule(payload: ScheduleUpsert, db: Session = Depends(get_db)) -> ScheduleRead:
    try:
        slot = content_service.create_schedule(
            db,
            actor_id=payload.actor_id,
            scope_id=payload.scope_id,
            day_of_week=payload.day_of_week,
            period_number=payload.period_number,
            subject=payload.subject,
            teacher_name=payload.teacher_name,
        )
        db.commit()
        db.refresh(slot)
        return slot
    except TrustRuleViolation as exc:
        raise to_http(db, exc) from exc
