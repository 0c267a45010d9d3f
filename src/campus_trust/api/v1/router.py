"""Primary API router definition."""

from fastapi import APIRouter

from . import admin, events, keys, posts, registrations, schedules, scopes, trust

api_router = APIRouter()

api_router.include_router(scopes.router)
api_router.include_router(keys.router)
api_router.include_router(admin.router)
api_router.include_router(registrations.router)
api_router.include_router(posts.router)
api_router.include_router(events.router)
api_router.include_router(schedules.router)
api_router.include_router(trust.router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}
