"""State normalizer: turn any persisted or imported value into a canonical State.

Every function here is total. Malformed input degrades to the nearest valid
default instead of raising, and the final sequencing pass guarantees that
every bucket (each group plus the ungrouped bucket) and the group list carry
dense 0..n-1 ``order`` values.
"""

import logging
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeVar

from pydantic import ValidationError

from app.core.enums import ExerciseViewMode, PayloadShape, SetsDisplayMode
from app.schemas.state import DEFAULT_STATE, Exercise, Group, State, ViewSettings
from app.services.workout_metrics import normalize_entry

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def is_number(value: Any) -> bool:
    """Finite int/float (bools and ints beyond float range excluded)."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _text(value: Any, fallback: str | None) -> str | None:
    if isinstance(value, str):
        return value.strip() or fallback
    if is_number(value):
        return str(value)
    return fallback


def _enum_or(enum_cls: type[E], value: Any, default: E) -> E:
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return default


def classify_payload(raw: Any) -> PayloadShape:
    """Structural check only: bare list, {exercises: [], groups: []}, or neither."""
    if isinstance(raw, list):
        return PayloadShape.LEGACY_ARRAY
    if (
        isinstance(raw, Mapping)
        and isinstance(raw.get("exercises"), list)
        and isinstance(raw.get("groups"), list)
    ):
        return PayloadShape.CURRENT
    return PayloadShape.INVALID


def is_legacy(raw: Any) -> bool:
    """True when a stored value should be re-persisted once in the current shape."""
    if classify_payload(raw) is not PayloadShape.CURRENT:
        return True
    settings = raw.get("settings")
    view_mode = settings.get("exerciseViewMode") if isinstance(settings, Mapping) else None
    if _enum_or(ExerciseViewMode, view_mode, None) is None:
        return True
    return any(
        not isinstance(ex, Mapping) or not is_number(ex.get("order")) for ex in raw["exercises"]
    )


def normalize_settings(raw: Any) -> ViewSettings:
    data = raw if isinstance(raw, Mapping) else {}
    return ViewSettings(
        exercise_view_mode=_enum_or(
            ExerciseViewMode, data.get("exerciseViewMode"), ExerciseViewMode.TOP_SET
        ),
        sets_display_mode=_enum_or(
            SetsDisplayMode, data.get("setsDisplayMode"), SetsDisplayMode.CONTINUOUS
        ),
    )


def _coerce_exercise(raw: Mapping, index: int) -> dict[str, Any]:
    entries = raw.get("entries")
    order = raw.get("order")
    return {
        "id": _text(raw.get("id"), None),
        "name": _text(raw.get("name"), f"Exercise {index + 1}"),
        "group_id": _text(raw.get("groupId"), None),
        "order": order if is_number(order) else index,
        "entries": [
            normalize_entry(entry)
            for entry in (entries if isinstance(entries, list) else [])
            if isinstance(entry, Mapping)
        ],
    }


def _coerce_group(raw: Mapping, index: int) -> dict[str, Any]:
    order = raw.get("order")
    return {
        "id": _text(raw.get("id"), None),
        "name": _text(raw.get("name"), f"Group {index + 1}"),
        "order": order if is_number(order) else index,
    }


def assign_unique_ids(
    items: list[tuple[int, dict[str, Any]]], prefix: str
) -> list[dict[str, Any]]:
    """Give every item a distinct id.

    The first holder of an explicit id keeps it. Missing ids become
    ``{prefix}-{index}``; repeated ids get a ``-2``, ``-3`` ... suffix. Neither
    may take an id some other item carries explicitly. ``groupId`` references
    to a repeated group id resolve to its first holder.
    """
    explicit = {item["id"] for _, item in items if item["id"] is not None}
    taken: set[str] = set()
    out = []
    for index, item in items:
        own = item["id"]
        if own is not None and own not in taken:
            candidate = own
        else:
            base = own if own is not None else f"{prefix}-{index}"
            candidate, suffix = base, 2
            while candidate in taken or candidate in explicit:
                candidate = f"{base}-{suffix}"
                suffix += 1
        taken.add(candidate)
        out.append({**item, "id": candidate})
    return out


def sequence(
    exercises: list[dict[str, Any]], groups: list[dict[str, Any]]
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Re-derive dense ``order`` values for every bucket and for the group list.

    Exercises pointing at a group that does not exist are moved to the
    ungrouped bucket. Ties on ``order`` keep their input position.
    """
    ordered_groups = sorted(groups, key=lambda g: g["order"])
    groups_out = [{**g, "order": i} for i, g in enumerate(ordered_groups)]
    known = {g["id"] for g in groups_out}

    buckets: dict[str | None, list[int]] = {}
    for position, ex in enumerate(exercises):
        key = ex["group_id"] if ex["group_id"] in known else None
        buckets.setdefault(key, []).append(position)

    exercises_out = list(exercises)
    for key, positions in buckets.items():
        positions.sort(key=lambda p: exercises[p]["order"])
        for index, position in enumerate(positions):
            exercises_out[position] = {**exercises[position], "group_id": key, "order": index}
    return exercises_out, groups_out


def _unwrap(raw: Any) -> Mapping | None:
    if isinstance(raw, State):
        return raw.to_raw()
    shape = classify_payload(raw)
    if shape is PayloadShape.LEGACY_ARRAY:
        return {"exercises": raw, "groups": []}
    if shape is PayloadShape.CURRENT:
        return raw
    # Objects written before groups existed: exercises only
    if isinstance(raw, Mapping) and isinstance(raw.get("exercises"), list) and raw.get("groups") is None:
        return {**raw, "groups": []}
    return None


def normalize(raw: Any) -> State:
    """Produce a canonical State from anything. Never raises."""
    data = _unwrap(raw)
    if data is None:
        return DEFAULT_STATE.model_copy(deep=True)

    exercises = assign_unique_ids(
        [(i, _coerce_exercise(ex, i)) for i, ex in enumerate(data["exercises"]) if isinstance(ex, Mapping)],
        "exercise",
    )
    groups = assign_unique_ids(
        [(i, _coerce_group(g, i)) for i, g in enumerate(data["groups"]) if isinstance(g, Mapping)],
        "group",
    )
    exercises, groups = sequence(exercises, groups)
    try:
        return State(
            exercises=[Exercise(**ex) for ex in exercises],
            groups=[Group(**g) for g in groups],
            settings=normalize_settings(data.get("settings")),
        )
    except ValidationError:
        logger.exception("Normalized state failed validation; falling back to defaults")
        return DEFAULT_STATE.model_copy(deep=True)
