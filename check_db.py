"""Report on the stored state: legacy shape, counts, bucket density."""

import asyncio
import os
import sys

sys.path.append(os.getcwd())

from app.core.config import get_settings
from app.db.session import async_session_maker, engine
from app.services.normalizer import is_legacy, normalize
from app.services.ordering import bucket_ids
from app.services.store import StateStore


def _dense(orders: list[int]) -> bool:
    return sorted(orders) == list(range(len(orders)))


async def check_data():
    settings = get_settings()
    async with async_session_maker() as session:
        try:
            raw = await StateStore(session, settings.storage_key).load()
        except Exception as e:
            print(f"Error reading storage: {e}")
            return
    if raw is None:
        print(f"Nothing stored under '{settings.storage_key}'")
        return

    state = normalize(raw)
    print(f"Legacy shape: {is_legacy(raw)}")
    print(f"Exercises: {len(state.exercises)}  Groups: {len(state.groups)}")
    print(f"View: {state.settings.exercise_view_mode.value} / {state.settings.sets_display_mode.value}")

    if isinstance(raw, list):
        raw_exercises = raw
    else:
        raw_exercises = raw.get("exercises") if isinstance(raw, dict) else None
    raw_exercises = raw_exercises if isinstance(raw_exercises, list) else []
    raw_orders: dict = {}
    for ex in raw_exercises:
        if isinstance(ex, dict) and isinstance(ex.get("order"), int):
            raw_orders.setdefault(ex.get("groupId"), []).append(ex["order"])
    for group_id, orders in raw_orders.items():
        status = "dense" if _dense(orders) else f"NOT dense {sorted(orders)}"
        print(f"  stored bucket {group_id or 'ungrouped'}: {status}")

    for group in [None, *state.groups]:
        key = group.id if group else None
        label = group.name if group else "Ungrouped"
        print(f"  {label}: {len(bucket_ids(state, key))} exercises")


async def main():
    await check_data()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
