"""Workout metrics: group logged sets into workouts and build chart series.

Entries are grouped by date (one workout per exercise per day), ranked
heaviest-first, and reduced to the numbers each view mode charts.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from app.core.constants import MAX_SETS
from app.core.enums import ExerciseViewMode, SetsDisplayMode
from app.schemas.metrics import ExerciseChart, SetsRow, TopSetPoint, VolumePoint, WorkoutSummary
from app.schemas.state import Entry, Exercise, ViewSettings


def _safe_number(value: Any, fallback: float = 0.0) -> float:
    if isinstance(value, bool):
        return fallback
    try:
        parsed = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    return parsed if math.isfinite(parsed) else fallback


def _safe_int(value: Any, fallback: int = 0) -> int:
    parsed = _safe_number(value, float(fallback))
    return int(parsed)


def normalize_entry(raw: Mapping | Entry) -> Entry:
    """Coerce a raw set into a valid Entry (missing numbers become 0)."""
    if isinstance(raw, Entry):
        return raw
    date = raw.get("date") or raw.get("createdAt") or ""
    note = raw.get("note")
    return Entry(
        date=str(date).strip(),
        weight=max(0.0, _safe_number(raw.get("weight"))),
        reps=max(0, _safe_int(raw.get("reps"))),
        note="" if note is None else str(note),
    )


def rank_sets_by_performance(sets: Iterable[Entry]) -> list[Entry]:
    """Heaviest first; more reps wins a tie."""
    return sorted(sets, key=lambda s: (s.weight, s.reps), reverse=True)


def best_set(sets: Iterable[Entry]) -> Entry | None:
    ranked = rank_sets_by_performance(sets)
    return ranked[0] if ranked else None


def workout_volume(sets: Iterable[Entry]) -> float:
    return sum(s.weight * s.reps for s in sets)


def group_entries_by_workout(entries: Iterable[Mapping | Entry]) -> list[tuple[str, list[Entry]]]:
    """(date, sets) pairs in ascending date order; dateless entries are dropped."""
    normalized = [normalize_entry(e) for e in entries]
    dated = sorted((e for e in normalized if e.date), key=lambda e: e.date)
    workouts: dict[str, list[Entry]] = {}
    for entry in dated:
        workouts.setdefault(entry.date, []).append(entry)
    return list(workouts.items())


def build_workout_timeline(entries: Iterable[Mapping | Entry]) -> list[WorkoutSummary]:
    timeline = []
    for date, sets in group_entries_by_workout(entries):
        ranked = rank_sets_by_performance(sets)
        timeline.append(
            WorkoutSummary(
                date=date,
                sets=sets,
                ranked_sets=ranked,
                best_set=ranked[0] if ranked else None,
                volume=workout_volume(sets),
                sets_count=len(sets),
            )
        )
    return timeline


def _distinct_weights(ranked: list[Entry]) -> list[Entry]:
    # First (best-reps) set of each weight
    seen: set[float] = set()
    unique = []
    for s in ranked:
        if s.weight not in seen:
            seen.add(s.weight)
            unique.append(s)
    return unique


def top_set_series(timeline: list[WorkoutSummary]) -> list[TopSetPoint]:
    return [
        TopSetPoint(date=w.date, weight=w.best_set.weight, reps=w.best_set.reps)
        for w in timeline
        if w.best_set is not None
    ]


def volume_series(timeline: list[WorkoutSummary]) -> list[VolumePoint]:
    return [VolumePoint(date=w.date, volume=w.volume) for w in timeline]


def sets_series(timeline: list[WorkoutSummary], display_mode: SetsDisplayMode) -> list[SetsRow]:
    if not timeline:
        return []
    rows = []
    if display_mode is SetsDisplayMode.CONTINUOUS:
        width = min(MAX_SETS, max(w.sets_count for w in timeline))
        for w in timeline:
            unique = _distinct_weights(w.ranked_sets)[:width]
            padding = width - len(unique)
            rows.append(
                SetsRow(
                    date=w.date,
                    weights=[s.weight for s in unique] + [0.0] * padding,
                    reps=[s.reps for s in unique] + [0] * padding,
                )
            )
        return rows

    for w in timeline:
        ascending = list(reversed(_distinct_weights(w.ranked_sets)[:MAX_SETS]))
        stack = []
        previous = 0.0
        for s in ascending:
            stack.append(max(0.0, s.weight - previous))
            previous = s.weight
        rows.append(
            SetsRow(
                date=w.date,
                weights=[s.weight for s in ascending],
                reps=[s.reps for s in ascending],
                stack=stack,
            )
        )
    return rows


def y_bounds(timeline: list[WorkoutSummary], display_mode: SetsDisplayMode) -> tuple[float, float]:
    weights = [s.weight for w in timeline for s in w.ranked_sets]
    if not weights:
        return 0.0, 1.0
    lower = 0.0 if display_mode is SetsDisplayMode.DISCRETE else max(0.0, min(weights) * 0.85)
    return lower, max(weights) * 1.08 + 1


def build_exercise_chart(exercise: Exercise, settings: ViewSettings) -> ExerciseChart:
    """Timeline plus the series for the currently selected view mode."""
    timeline = build_workout_timeline(exercise.entries)
    view_mode = settings.exercise_view_mode
    display_mode = settings.sets_display_mode
    y_min, y_max = y_bounds(timeline, display_mode)
    chart = ExerciseChart(
        exercise_id=exercise.id,
        view_mode=view_mode,
        sets_display_mode=display_mode,
        timeline=timeline,
        y_min=y_min,
        y_max=y_max,
    )
    if view_mode is ExerciseViewMode.TOP_SET:
        chart.top_sets = top_set_series(timeline)
    elif view_mode is ExerciseViewMode.VOLUME:
        chart.volumes = volume_series(timeline)
    else:
        chart.sets = sets_series(timeline, display_mode)
    return chart
