"""API v1 router aggregation."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    exercises,
    groups,
    health,
    state,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(state.router, prefix="/state", tags=["state"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
