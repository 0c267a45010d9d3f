"""Startup hook that seeds the default grade and section scopes."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from ..core.config import get_settings
from ..core.database import SessionLocal
from ..services.scope_service import seed_default_scopes

logger = logging.getLogger(__name__)


def run_seed_once() -> dict[str, int]:
    """Seed scopes in a dedicated session and commit."""

    session = SessionLocal()
    try:
        summary = seed_default_scopes(session)
        session.commit()
        return summary
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def register_seeding(app: FastAPI) -> None:
    """Attach the scope seed to application startup when enabled in settings."""

    @app.on_event("startup")
    async def seed_scopes() -> None:
        if not get_settings().seed_default_scopes:
            return
        try:
            summary = run_seed_once()
            logger.info("scope seed completed: %s", summary)
        except Exception:  # pragma: no cover - startup must not abort on a bad seed
            logger.exception("scope seed failed")
