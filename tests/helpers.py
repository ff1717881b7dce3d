"""Builders and invariant checks shared by the test modules."""

import itertools

from app.schemas.state import State
from app.services.normalizer import normalize
from app.services.ordering import bucket_ids, bucket_key


def build_state(exercises=(), groups=(), settings=None) -> State:
    return normalize(
        {
            "exercises": list(exercises),
            "groups": list(groups),
            "settings": settings or {"exerciseViewMode": "top_set"},
        }
    )


def counter_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


def orders_by_bucket(state: State) -> dict:
    buckets: dict = {}
    for ex in state.exercises:
        buckets.setdefault(bucket_key(state, ex), []).append(ex.order)
    return buckets


def assert_dense(state: State) -> None:
    for key, orders in orders_by_bucket(state).items():
        assert sorted(orders) == list(range(len(orders))), f"bucket {key!r}: {orders}"
    group_orders = [g.order for g in state.groups]
    assert sorted(group_orders) == list(range(len(group_orders)))


def bucket(state: State, group_id) -> list[str]:
    return bucket_ids(state, group_id)
