"""Request bodies for the HTTP surface (camelCase or snake_case accepted)."""

import datetime as dt

from pydantic import Field

from app.core.enums import ExerciseViewMode, PayloadShape, SetsDisplayMode
from app.schemas.state import CamelModel, State


class ExerciseCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    group_id: str | None = None


class ExerciseMove(CamelModel):
    """Target bucket (None = ungrouped) and index; the index is clamped."""

    group_id: str | None = None
    index: int = 0


class EntryCreate(CamelModel):
    date: dt.date
    weight: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    note: str = Field(default="", max_length=500)


class EntryDelete(CamelModel):
    date: str
    weight: float
    reps: int
    note: str | None = None


class GroupCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


class GroupReorder(CamelModel):
    group_ids: list[str]


class SettingsUpdate(CamelModel):
    exercise_view_mode: ExerciseViewMode | None = None
    sets_display_mode: SetsDisplayMode | None = None


class ImportResponse(CamelModel):
    message: str
    shape: PayloadShape
    state: State
