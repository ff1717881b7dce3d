"""Shared FastAPI dependencies."""

from fastapi import HTTPException, Request

from app.schemas.state import Exercise, Group, State
from app.services.store import StateManager


def get_state_manager(request: Request) -> StateManager:
    """StateManager created by the application lifespan."""
    return request.app.state.state_manager


def require_exercise(state: State, exercise_id: str) -> Exercise:
    exercise = state.find_exercise(exercise_id)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


def require_group(state: State, group_id: str) -> Group:
    group = state.find_group(group_id)
    if group is None:
        raise HTTPException(status_code=404, detail="Group not found")
    return group
