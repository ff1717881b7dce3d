"""Group endpoints: create, delete, reorder."""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_state_manager, require_group
from app.schemas.requests import GroupCreate, GroupReorder
from app.schemas.state import State
from app.services import ordering
from app.services.store import StateManager

router = APIRouter()


@router.post("", response_model=State, status_code=201)
async def create_group(
    payload: GroupCreate,
    manager: StateManager = Depends(get_state_manager),
):
    """Append a group. Names are unique (case-insensitive) at this layer."""
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Please enter a group name")

    def _create(state: State) -> State:
        if any(g.name.casefold() == name.casefold() for g in state.groups):
            raise HTTPException(status_code=400, detail="Group with this name already exists")
        return ordering.add_group(state, name)

    return await manager.apply(_create)


@router.put("/order", response_model=State)
async def reorder_groups(
    payload: GroupReorder,
    manager: StateManager = Depends(get_state_manager),
):
    """Reorder groups; groups missing from the list keep their relative order after it."""
    return await manager.apply(ordering.reorder_groups, payload.group_ids)


@router.delete("/{group_id}", response_model=State)
async def delete_group(
    group_id: str,
    manager: StateManager = Depends(get_state_manager),
):
    """Delete a group; its exercises move to the end of the ungrouped list."""

    def _delete(state: State) -> State:
        require_group(state, group_id)
        return ordering.delete_group(state, group_id)

    return await manager.apply(_delete)
