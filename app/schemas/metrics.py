"""Workout timeline and chart series schemas."""

from app.core.enums import ExerciseViewMode, SetsDisplayMode
from app.schemas.state import CamelModel, Entry


class WorkoutSummary(CamelModel):
    """All sets logged for one exercise on one date."""

    date: str
    sets: list[Entry]
    ranked_sets: list[Entry]
    best_set: Entry | None = None
    volume: float
    sets_count: int


class TopSetPoint(CamelModel):
    date: str
    weight: float
    reps: int


class VolumePoint(CamelModel):
    date: str
    volume: float


class SetsRow(CamelModel):
    """One workout in the SETS view.

    ``weights``/``reps`` are best-first for CONTINUOUS (padded with zeros) and
    lightest-first for DISCRETE, where ``stack`` holds the bar increments.
    """

    date: str
    weights: list[float]
    reps: list[int]
    stack: list[float] = []


class ExerciseChart(CamelModel):
    exercise_id: str
    view_mode: ExerciseViewMode
    sets_display_mode: SetsDisplayMode
    timeline: list[WorkoutSummary]
    top_sets: list[TopSetPoint] = []
    volumes: list[VolumePoint] = []
    sets: list[SetsRow] = []
    y_min: float = 0
    y_max: float = 1
