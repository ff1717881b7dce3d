"""Shared enums for state, services and API."""

from enum import Enum


class ExerciseViewMode(str, Enum):
    """Which chart an exercise card shows."""

    TOP_SET = "top_set"  # Heaviest set per workout
    VOLUME = "volume"  # Sum of weight × reps per workout
    SETS = "sets"  # Every ranked set per workout


class SetsDisplayMode(str, Enum):
    """How the SETS view lays out ranked sets."""

    CONTINUOUS = "continuous"  # Overlapping areas, absolute weights
    DISCRETE = "discrete"  # Stacked bars, ascending increments


class PayloadShape(str, Enum):
    """Structural classification of an imported or persisted value."""

    LEGACY_ARRAY = "legacy_array"  # Bare list of exercises
    CURRENT = "current"  # {exercises, groups, settings}
    INVALID = "invalid"


class ImportStatus(str, Enum):
    """Outcome of a bulk import."""

    OK = "ok"
    UNPARSEABLE = "unparseable"  # Not JSON at all
    INVALID_FORMAT = "invalid_format"  # JSON, but the wrong shape
