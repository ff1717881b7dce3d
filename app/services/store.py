"""Persistence adapter and the host that applies engine operations.

``StateStore`` is a plain get/set over one key. ``StateManager`` owns the
load -> operate -> save cycle: one operation at a time, saved only when the
engine actually returned a new State.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.app_state import AppState
from app.schemas.state import State
from app.services.import_export import ImportResult, parse_import
from app.services.normalizer import is_legacy, normalize

logger = logging.getLogger(__name__)


class StateStore:
    """Key-value access to the serialized State."""

    def __init__(self, session: AsyncSession, key: str) -> None:
        self.session = session
        self.key = key

    async def load(self) -> Any | None:
        """Last saved raw value, or None when nothing usable is stored."""
        row = await self.session.get(AppState, self.key)
        if row is None:
            return None
        try:
            return json.loads(row.value)
        except ValueError:
            logger.warning("Stored value under %r is not valid JSON; ignoring it", self.key)
            return None

    async def save(self, state: State) -> None:
        value = json.dumps(state.to_raw(), ensure_ascii=False)
        row = await self.session.get(AppState, self.key)
        if row is None:
            self.session.add(AppState(key=self.key, value=value))
        else:
            row.value = value
        await self.session.flush()
        logger.debug("Saved state under %r (%d bytes)", self.key, len(value))


class StateManager:
    """Single writer for the stored State."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], key: str) -> None:
        self._session_maker = session_maker
        self.key = key
        self._lock = asyncio.Lock()

    async def initialize(self) -> State:
        """Load once at startup; legacy-shaped data is re-persisted in the current shape."""
        async with self._lock, self._session_maker() as session:
            store = StateStore(session, self.key)
            raw = await store.load()
            state = normalize(raw)
            if raw is None:
                logger.info("No stored state under %r; starting empty", self.key)
            elif is_legacy(raw):
                logger.info("Upgrading legacy state under %r", self.key)
                await store.save(state)
                await session.commit()
            return state

    async def load(self) -> State:
        async with self._session_maker() as session:
            return normalize(await StateStore(session, self.key).load())

    async def apply(self, operation: Callable[..., State], *args: Any, **kwargs: Any) -> State:
        """Run one engine operation against the stored State and persist the result."""
        async with self._lock, self._session_maker() as session:
            store = StateStore(session, self.key)
            current = normalize(await store.load())
            updated = operation(current, *args, **kwargs)
            if updated is not current:
                await store.save(updated)
                await session.commit()
            return updated

    async def import_text(self, text: str | bytes) -> ImportResult:
        """Bulk import; the stored State is untouched unless the import succeeds."""
        async with self._lock, self._session_maker() as session:
            store = StateStore(session, self.key)
            result = parse_import(normalize(await store.load()), text)
            if result.ok:
                await store.save(result.state)
                await session.commit()
            return result
