"""Whole-state endpoints: read, export, import, view settings."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from app.api.deps import get_state_manager
from app.core.constants import EXPORT_FILENAME
from app.core.enums import ImportStatus
from app.schemas.requests import ImportResponse, SettingsUpdate
from app.schemas.state import State
from app.services import ordering
from app.services.import_export import export_state
from app.services.store import StateManager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=State)
async def get_state(manager: StateManager = Depends(get_state_manager)):
    """Current exercises, groups and settings."""
    return await manager.load()


@router.get("/export")
async def export(manager: StateManager = Depends(get_state_manager)):
    """Download the whole state as pretty-printed JSON."""
    state = await manager.load()
    return Response(
        content=export_state(state),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/import", response_model=ImportResponse)
async def import_state(
    request: Request,
    manager: StateManager = Depends(get_state_manager),
):
    """Replace the state with an exported file (or a legacy bare exercise list)."""
    result = await manager.import_text(await request.body())
    if result.status is ImportStatus.UNPARSEABLE:
        raise HTTPException(status_code=400, detail=result.message)
    if result.status is ImportStatus.INVALID_FORMAT:
        raise HTTPException(status_code=422, detail=result.message)
    logger.info(
        "Imported %d exercises, %d groups (%s)",
        len(result.state.exercises),
        len(result.state.groups),
        result.shape.value,
    )
    return ImportResponse(message=result.message, shape=result.shape, state=result.state)


@router.put("/settings", response_model=State)
async def update_settings(
    payload: SettingsUpdate,
    manager: StateManager = Depends(get_state_manager),
):
    """Change the chart view mode and/or the sets display mode."""

    def _update(state: State) -> State:
        if payload.exercise_view_mode is not None:
            state = ordering.set_exercise_view_mode(state, payload.exercise_view_mode)
        if payload.sets_display_mode is not None:
            state = ordering.set_sets_display_mode(state, payload.sets_display_mode)
        return state

    return await manager.apply(_update)
