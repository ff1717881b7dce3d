"""State aggregate schemas: Entry, Exercise, Group, ViewSettings, State.

Field names are snake_case in Python and camelCase on the wire (``groupId``,
``exerciseViewMode``) so persisted and exported JSON keeps the shape the
client has always written.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.enums import ExerciseViewMode, SetsDisplayMode


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Entry(CamelModel):
    """A single logged set. Identity is the full field tuple."""

    model_config = ConfigDict(frozen=True)

    date: str
    weight: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    note: str = ""

    def matches(self, other: "Entry") -> bool:
        return (
            self.date == other.date
            and self.weight == other.weight
            and self.reps == other.reps
            and self.note == other.note
        )


class Exercise(CamelModel):
    id: str
    name: str = Field(..., min_length=1)
    group_id: str | None = None
    order: int = Field(0, ge=0)
    entries: list[Entry] = []


class Group(CamelModel):
    id: str
    name: str = Field(..., min_length=1)
    order: int = Field(0, ge=0)


class ViewSettings(CamelModel):
    """Presentation-only settings; defaults apply when missing or invalid."""

    exercise_view_mode: ExerciseViewMode = ExerciseViewMode.TOP_SET
    sets_display_mode: SetsDisplayMode = SetsDisplayMode.CONTINUOUS


class State(CamelModel):
    """Root aggregate threaded through the ordering engine."""

    exercises: list[Exercise] = []
    groups: list[Group] = []
    settings: ViewSettings = Field(default_factory=ViewSettings)

    def to_raw(self) -> dict[str, Any]:
        """JSON-ready dict in the persisted (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)

    def find_exercise(self, exercise_id: str) -> Exercise | None:
        return next((ex for ex in self.exercises if ex.id == exercise_id), None)

    def find_group(self, group_id: str) -> Group | None:
        return next((g for g in self.groups if g.id == group_id), None)


DEFAULT_STATE = State()
