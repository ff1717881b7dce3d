"""Async tests for the key-value store and the StateManager host."""

import json

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.db.base import Base
from app.models.app_state import AppState
from app.schemas.state import State
from app.services import ordering
from app.services.store import StateManager, StateStore

KEY = "test-key"

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def _setup(tmp_path, stored=None):
    engine = create_async_engine(f"sqlite+aiosqlite:///{(tmp_path / 'store.db').as_posix()}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    if stored is not None:
        async with session_maker() as session:
            session.add(AppState(key=KEY, value=stored))
            await session.commit()
    return engine, session_maker, StateManager(session_maker, KEY)


async def _raw(session_maker):
    async with session_maker() as session:
        return await StateStore(session, KEY).load()


async def test_initialize_empty_store(tmp_path):
    engine, session_maker, manager = await _setup(tmp_path)

    assert await manager.initialize() == State()
    assert await _raw(session_maker) is None
    await engine.dispose()


async def test_initialize_repersists_legacy_value(tmp_path):
    legacy = json.dumps([{"id": "x", "name": "Squat", "entries": []}])
    engine, session_maker, manager = await _setup(tmp_path, stored=legacy)

    state = await manager.initialize()

    raw = await _raw(session_maker)
    assert raw == state.to_raw()
    assert raw["groups"] == []
    assert raw["exercises"][0]["order"] == 0
    assert raw["settings"]["exerciseViewMode"] == "top_set"
    await engine.dispose()


async def test_unparseable_stored_value_loads_as_empty(tmp_path):
    engine, session_maker, manager = await _setup(tmp_path, stored="{broken")

    assert await _raw(session_maker) is None
    assert await manager.load() == State()
    await engine.dispose()


async def test_apply_persists_changes(tmp_path):
    engine, session_maker, manager = await _setup(tmp_path)

    state = await manager.apply(ordering.add_group, "Push")
    state = await manager.apply(ordering.add_exercise, "Bench", state.groups[0].id)

    assert await manager.load() == state
    assert (await _raw(session_maker))["exercises"][0]["name"] == "Bench"
    await engine.dispose()


async def test_rejected_operation_is_not_saved(tmp_path):
    engine, session_maker, manager = await _setup(tmp_path)

    state = await manager.apply(ordering.add_exercise, "   ")

    assert state == State()
    assert await _raw(session_maker) is None
    await engine.dispose()


async def test_failed_import_leaves_store_untouched(tmp_path):
    engine, session_maker, manager = await _setup(tmp_path)
    await manager.apply(ordering.add_exercise, "Row")
    before = await _raw(session_maker)

    result = await manager.import_text('{"exercises": []}')

    assert not result.ok
    assert await _raw(session_maker) == before
    await engine.dispose()


async def test_successful_import_replaces_state(tmp_path):
    engine, session_maker, manager = await _setup(tmp_path)
    await manager.apply(ordering.add_exercise, "Row")

    result = await manager.import_text('[{"id": "x", "name": "Squat"}]')

    assert result.ok
    assert [ex.id for ex in (await manager.load()).exercises] == ["x"]
    await engine.dispose()
