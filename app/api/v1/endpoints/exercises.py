"""Exercise endpoints: create, delete, move, log and delete sets, timeline."""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_state_manager, require_exercise, require_group
from app.schemas.metrics import ExerciseChart
from app.schemas.requests import EntryCreate, EntryDelete, ExerciseCreate, ExerciseMove
from app.schemas.state import State
from app.services import ordering
from app.services.store import StateManager
from app.services.workout_metrics import build_exercise_chart

router = APIRouter()


@router.post("", response_model=State, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    manager: StateManager = Depends(get_state_manager),
):
    """Append an exercise to the end of its bucket (ungrouped when no group_id)."""
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="Please enter an exercise name")

    def _create(state: State) -> State:
        if payload.group_id is not None:
            require_group(state, payload.group_id)
        return ordering.add_exercise(state, payload.name, payload.group_id)

    return await manager.apply(_create)


@router.delete("/{exercise_id}", response_model=State)
async def delete_exercise(
    exercise_id: str,
    manager: StateManager = Depends(get_state_manager),
):
    """Delete an exercise and its sets; siblings close the gap."""

    def _delete(state: State) -> State:
        require_exercise(state, exercise_id)
        return ordering.delete_exercise(state, exercise_id)

    return await manager.apply(_delete)


@router.post("/{exercise_id}/move", response_model=State)
async def move_exercise(
    exercise_id: str,
    payload: ExerciseMove,
    manager: StateManager = Depends(get_state_manager),
):
    """Move within the current bucket or into another one."""

    def _move(state: State) -> State:
        require_exercise(state, exercise_id)
        if payload.group_id is not None:
            require_group(state, payload.group_id)
        return ordering.move_exercise(state, exercise_id, payload.group_id, payload.index)

    return await manager.apply(_move)


@router.post("/{exercise_id}/entries", response_model=State, status_code=201)
async def add_entry(
    exercise_id: str,
    payload: EntryCreate,
    manager: StateManager = Depends(get_state_manager),
):
    """Log a set (weight × reps) for a date."""

    def _log(state: State) -> State:
        require_exercise(state, exercise_id)
        return ordering.add_entry(
            state, exercise_id, payload.date, payload.weight, payload.reps, payload.note
        )

    return await manager.apply(_log)


@router.post("/{exercise_id}/entries/delete", response_model=State)
async def delete_entry(
    exercise_id: str,
    payload: EntryDelete,
    manager: StateManager = Depends(get_state_manager),
):
    """Delete every set equal to the given (date, weight, reps, note)."""

    def _delete(state: State) -> State:
        require_exercise(state, exercise_id)
        return ordering.delete_entry(state, exercise_id, payload.model_dump(by_alias=True))

    return await manager.apply(_delete)


@router.get("/{exercise_id}/timeline", response_model=ExerciseChart)
async def get_exercise_timeline(
    exercise_id: str,
    manager: StateManager = Depends(get_state_manager),
):
    """Workouts for one exercise plus the series for the current view mode."""
    state = await manager.load()
    exercise = require_exercise(state, exercise_id)
    return build_exercise_chart(exercise, state.settings)
