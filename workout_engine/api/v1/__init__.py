"""API v1 router aggregation."""

from fastapi import APIRouter

from workout_engine.api.v1.endpoints import exercises, health, pr, session, stats, templates

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(session.router, prefix="/session", tags=["session"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(pr.router, prefix="/pr", tags=["pr"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
