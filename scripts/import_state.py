"""Import an exported JSON file (or a legacy exercise list) into the store."""

import asyncio
import os
import sys

# Add parent directory to path so we can import app modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import async_session_maker, engine
from app.services.store import StateManager


async def main(path: str) -> int:
    settings = get_settings()
    with open(path, "rb") as f:
        text = f.read()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    manager = StateManager(async_session_maker, settings.storage_key)
    result = await manager.import_text(text)
    await engine.dispose()

    print(result.message)
    if not result.ok:
        return 1
    print(f"{len(result.state.exercises)} exercises, {len(result.state.groups)} groups ({result.shape.value})")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python scripts/import_state.py <file.json>")
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))
