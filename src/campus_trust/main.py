"""FastAPI application entrypoint for the campus trust engine."""

import logging
from typing import Optional

from fastapi import FastAPI

from .api.v1.router import api_router
from .core.config import get_settings
from .jobs import register_seeding
from .services.moderation_service import ContentClassifier


def create_app(content_classifier: Optional[ContentClassifier] = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    logging.basicConfig(level=get_settings().log_level.upper())
    app = FastAPI(title="Campus Trust API", version="0.1.0")
    app.state.content_classifier = content_classifier
    app.include_router(api_router, prefix="/api/v1")
    register_seeding(app)
    return app


app = create_app()
