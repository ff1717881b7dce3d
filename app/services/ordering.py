"""Ordering engine: pure State -> State operations.

Each bucket (one per group, plus the ungrouped bucket ``None``) is an ordered
list of exercises whose ``order`` values are 0..n-1; the group list is one
more such list. Every operation leaves all of them dense before returning.

Rejected operations (empty names, unknown ids, invalid values) return the
input State object itself, so callers can test ``result is state`` to skip
persisting.
"""

import datetime as dt
import uuid
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from app.core.enums import ExerciseViewMode, PayloadShape, SetsDisplayMode
from app.schemas.state import Entry, Exercise, Group, State
from app.services.normalizer import classify_payload, is_number, normalize
from app.services.workout_metrics import normalize_entry

IdFactory = Callable[[], str]


def new_id() -> str:
    return uuid.uuid4().hex


# --- bucket helpers -------------------------------------------------------


def _group_ids(state: State) -> set[str]:
    return {g.id for g in state.groups}


def bucket_key(state: State, exercise: Exercise) -> str | None:
    """Bucket an exercise sorts into; unknown group ids count as ungrouped."""
    if exercise.group_id is not None and exercise.group_id in _group_ids(state):
        return exercise.group_id
    return None


def bucket_ids(state: State, group_id: str | None) -> list[str]:
    """Exercise ids of one bucket in display order."""
    known = _group_ids(state)
    members = []
    for position, ex in enumerate(state.exercises):
        key = ex.group_id if ex.group_id in known else None
        if key == group_id:
            members.append((ex.order, position, ex.id))
    return [ex_id for _, _, ex_id in sorted(members)]


def _apply_sequences(state: State, sequences: Mapping[str | None, list[str]]) -> State:
    """Rewrite ``group_id``/``order`` of every exercise listed in ``sequences``."""
    placement = {
        ex_id: (key, index)
        for key, ids in sequences.items()
        for index, ex_id in enumerate(ids)
    }
    changed = False
    exercises = []
    for ex in state.exercises:
        if ex.id in placement:
            key, index = placement[ex.id]
            if ex.group_id != key or ex.order != index:
                ex = ex.model_copy(update={"group_id": key, "order": index})
                changed = True
        exercises.append(ex)
    if not changed:
        return state
    return state.model_copy(update={"exercises": exercises})


def _sequence_groups(groups: Iterable[Group]) -> list[Group]:
    ordered = sorted(groups, key=lambda g: g.order)
    return [g if g.order == i else g.model_copy(update={"order": i}) for i, g in enumerate(ordered)]


def _replace_exercise(state: State, updated: Exercise) -> State:
    exercises = [updated if ex.id == updated.id else ex for ex in state.exercises]
    return state.model_copy(update={"exercises": exercises})


def _to_number(value: Any) -> float | None:
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if is_number(parsed) else None
    return None


# --- exercises ------------------------------------------------------------


def add_exercise(
    state: State,
    name: str,
    group_id: str | None = None,
    *,
    id_factory: IdFactory = new_id,
) -> State:
    """Append a new exercise at the end of its target bucket."""
    trimmed = name.strip() if isinstance(name, str) else ""
    if not trimmed:
        return state
    if group_id is not None and group_id not in _group_ids(state):
        return state
    exercise = Exercise(
        id=id_factory(),
        name=trimmed,
        group_id=group_id,
        order=len(bucket_ids(state, group_id)),
        entries=[],
    )
    return state.model_copy(update={"exercises": [*state.exercises, exercise]})


def delete_exercise(state: State, exercise_id: str) -> State:
    """Remove an exercise and close the gap it leaves in its bucket."""
    exercise = state.find_exercise(exercise_id)
    if exercise is None:
        return state
    key = bucket_key(state, exercise)
    reduced = state.model_copy(
        update={"exercises": [ex for ex in state.exercises if ex.id != exercise_id]}
    )
    return _apply_sequences(reduced, {key: bucket_ids(reduced, key)})


def move_exercise(
    state: State,
    exercise_id: str,
    target_group_id: str | None,
    target_index: int,
) -> State:
    """Move an exercise to ``target_index`` of a bucket (its own or another).

    The source bucket is re-sequenced without the exercise; the target bucket
    gets it inserted at the clamped index and is re-sequenced as well.
    """
    exercise = state.find_exercise(exercise_id)
    if exercise is None:
        return state
    if target_group_id is not None and target_group_id not in _group_ids(state):
        return state
    if not is_number(target_index):
        return state

    source = bucket_key(state, exercise)
    source_ids = [ex_id for ex_id in bucket_ids(state, source) if ex_id != exercise_id]
    if target_group_id == source:
        target_ids = list(source_ids)
    else:
        target_ids = bucket_ids(state, target_group_id)

    index = min(max(int(target_index), 0), len(target_ids))
    target_ids.insert(index, exercise_id)

    sequences: dict[str | None, list[str]] = {target_group_id: target_ids}
    if source != target_group_id:
        sequences[source] = source_ids
    return _apply_sequences(state, sequences)


# --- entries --------------------------------------------------------------


def add_entry(
    state: State,
    exercise_id: str,
    date: str | dt.date,
    weight: float | str,
    reps: int | str,
    note: str | None = "",
) -> State:
    """Append a logged set to an exercise. Entries keep insertion order."""
    if not date or not weight or not reps:
        return state
    weight_value = _to_number(weight)
    reps_value = _to_number(reps)
    if weight_value is None or reps_value is None or weight_value < 0 or reps_value < 0:
        return state
    exercise = state.find_exercise(exercise_id)
    if exercise is None:
        return state

    entry = Entry(
        date=date.isoformat() if isinstance(date, dt.date) else str(date).strip(),
        weight=weight_value,
        reps=int(reps_value),
        note=(note or "").strip(),
    )
    updated = exercise.model_copy(update={"entries": [*exercise.entries, entry]})
    return _replace_exercise(state, updated)


def delete_entry(state: State, exercise_id: str, entry_match: Entry | Mapping) -> State:
    """Remove every entry structurally equal to ``entry_match``.

    Entries carry no id, so identical sets logged on the same day are all
    removed together.
    """
    exercise = state.find_exercise(exercise_id)
    if exercise is None:
        return state
    match = entry_match if isinstance(entry_match, Entry) else normalize_entry(entry_match)
    remaining = [entry for entry in exercise.entries if not entry.matches(match)]
    if len(remaining) == len(exercise.entries):
        return state
    return _replace_exercise(state, exercise.model_copy(update={"entries": remaining}))


# --- groups ---------------------------------------------------------------


def add_group(state: State, name: str, *, id_factory: IdFactory = new_id) -> State:
    """Append a group at the end of the group sequence. Names are not deduplicated."""
    trimmed = name.strip() if isinstance(name, str) else ""
    if not trimmed:
        return state
    group = Group(id=id_factory(), name=trimmed, order=len(state.groups))
    return state.model_copy(update={"groups": [*state.groups, group]})


def delete_group(state: State, group_id: str) -> State:
    """Remove a group; its exercises join the end of the ungrouped bucket."""
    if state.find_group(group_id) is None:
        return state
    orphaned = bucket_ids(state, group_id)
    ungrouped = bucket_ids(state, None)
    reduced = state.model_copy(
        update={"groups": _sequence_groups(g for g in state.groups if g.id != group_id)}
    )
    return _apply_sequences(reduced, {None: ungrouped + orphaned})


def reorder_groups(state: State, ordered_group_ids: Iterable[str]) -> State:
    """Put the given group ids first, in order; unlisted groups follow as before."""
    by_id = {g.id: g for g in state.groups}
    listed: list[str] = []
    for group_id in ordered_group_ids:
        if group_id in by_id and group_id not in listed:
            listed.append(group_id)
    rest = [g.id for g in sorted(state.groups, key=lambda g: g.order) if g.id not in listed]

    groups = []
    for index, group_id in enumerate(listed + rest):
        group = by_id[group_id]
        groups.append(group if group.order == index else group.model_copy(update={"order": index}))
    if groups == state.groups:
        return state
    return state.model_copy(update={"groups": groups})


# --- bulk / settings ------------------------------------------------------


def replace_state(state: State, raw_imported: Any) -> State:
    """Swap in imported data (legacy list or current shape); anything else is ignored."""
    if classify_payload(raw_imported) is PayloadShape.INVALID:
        return state
    return normalize(raw_imported)


def set_exercise_view_mode(state: State, mode: ExerciseViewMode | str) -> State:
    try:
        value = ExerciseViewMode(mode)
    except (ValueError, TypeError):
        return state
    if state.settings.exercise_view_mode is value:
        return state
    settings = state.settings.model_copy(update={"exercise_view_mode": value})
    return state.model_copy(update={"settings": settings})


def set_sets_display_mode(state: State, mode: SetsDisplayMode | str) -> State:
    try:
        value = SetsDisplayMode(mode)
    except (ValueError, TypeError):
        return state
    if state.settings.sets_display_mode is value:
        return state
    settings = state.settings.model_copy(update={"sets_display_mode": value})
    return state.model_copy(update={"settings": settings})
