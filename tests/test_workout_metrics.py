"""Unit tests for workout timeline and chart series."""

import pytest

from app.core.enums import ExerciseViewMode, SetsDisplayMode
from app.schemas.state import Entry, Exercise, ViewSettings
from app.services.workout_metrics import (
    best_set,
    build_exercise_chart,
    build_workout_timeline,
    group_entries_by_workout,
    normalize_entry,
    rank_sets_by_performance,
    sets_series,
    workout_volume,
    y_bounds,
)


def _e(date, weight, reps, note=""):
    return Entry(date=date, weight=weight, reps=reps, note=note)


@pytest.fixture
def entries():
    return [
        _e("2024-01-08", 90, 5),
        _e("2024-01-01", 100, 3),
        _e("2024-01-01", 80, 8),
        _e("2024-01-01", 100, 5),
    ]


@pytest.mark.unit
class TestEntryHelpers:
    def test_normalize_entry_coerces_values(self):
        entry = normalize_entry({"createdAt": "2024-02-02", "weight": "abc", "reps": "-4"})
        assert entry == Entry(date="2024-02-02", weight=0.0, reps=0, note="")

    def test_rank_prefers_weight_then_reps(self, entries):
        ranked = rank_sets_by_performance(entries)
        assert [(s.weight, s.reps) for s in ranked] == [(100, 5), (100, 3), (90, 5), (80, 8)]

    def test_best_set_and_volume(self, entries):
        assert best_set([]) is None
        assert best_set(entries) == _e("2024-01-01", 100, 5)
        assert workout_volume(entries) == 90 * 5 + 100 * 3 + 80 * 8 + 100 * 5

    def test_group_by_workout_sorts_and_drops_dateless(self, entries):
        grouped = group_entries_by_workout([*entries, {"weight": 50, "reps": 5}])

        assert [date for date, _ in grouped] == ["2024-01-01", "2024-01-08"]
        assert len(grouped[0][1]) == 3


@pytest.mark.unit
class TestTimeline:
    def test_build_workout_timeline(self, entries):
        first, second = build_workout_timeline(entries)

        assert first.date == "2024-01-01"
        assert first.sets_count == 3
        assert first.best_set == _e("2024-01-01", 100, 5)
        assert first.volume == 100 * 3 + 80 * 8 + 100 * 5
        assert second.ranked_sets == [_e("2024-01-08", 90, 5)]

    def test_continuous_sets_are_padded(self, entries):
        rows = sets_series(build_workout_timeline(entries), SetsDisplayMode.CONTINUOUS)

        assert rows[0].weights == [100, 80, 0]
        assert rows[0].reps == [5, 8, 0]
        assert rows[1].weights == [90, 0, 0]
        assert rows[0].stack == []

    def test_discrete_sets_stack_ascending(self, entries):
        rows = sets_series(build_workout_timeline(entries), SetsDisplayMode.DISCRETE)

        assert rows[0].weights == [80, 100]
        assert rows[0].stack == [80, 20]
        assert rows[0].reps == [8, 5]

    def test_sets_series_caps_at_six(self):
        many = [_e("2024-01-01", w, 1) for w in range(10, 90, 10)]
        rows = sets_series(build_workout_timeline(many), SetsDisplayMode.DISCRETE)
        assert rows[0].weights == [30, 40, 50, 60, 70, 80]

    def test_y_bounds(self, entries):
        timeline = build_workout_timeline(entries)

        lower, upper = y_bounds(timeline, SetsDisplayMode.CONTINUOUS)
        assert lower == pytest.approx(68.0)
        assert upper == pytest.approx(109.0)
        assert y_bounds(timeline, SetsDisplayMode.DISCRETE)[0] == 0
        assert y_bounds([], SetsDisplayMode.CONTINUOUS) == (0.0, 1.0)


@pytest.mark.unit
class TestExerciseChart:
    @pytest.fixture
    def exercise(self, entries):
        return Exercise(id="bench", name="Bench", entries=entries)

    def test_top_set_mode(self, exercise):
        chart = build_exercise_chart(exercise, ViewSettings())

        assert [(p.date, p.weight, p.reps) for p in chart.top_sets] == [
            ("2024-01-01", 100, 5),
            ("2024-01-08", 90, 5),
        ]
        assert chart.volumes == [] and chart.sets == []

    def test_volume_mode(self, exercise):
        chart = build_exercise_chart(exercise, ViewSettings(exercise_view_mode=ExerciseViewMode.VOLUME))

        assert [p.volume for p in chart.volumes] == [1440, 450]
        assert chart.top_sets == []

    def test_sets_mode(self, exercise):
        settings = ViewSettings(
            exercise_view_mode=ExerciseViewMode.SETS, sets_display_mode=SetsDisplayMode.DISCRETE
        )
        chart = build_exercise_chart(exercise, settings)

        assert len(chart.sets) == 2
        assert chart.y_min == 0

    def test_empty_exercise(self):
        chart = build_exercise_chart(Exercise(id="x", name="X"), ViewSettings())
        assert chart.timeline == [] and chart.top_sets == []
