"""Point the app at a throwaway SQLite file before anything imports its settings."""

import os
import tempfile
from pathlib import Path

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="replog-tests-"))
os.environ["DATABASE_PATH"] = str(_TMP_DIR / "replog-test.db")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CREATE_TABLES"] = "true"


@pytest.fixture
def client():
    """TestClient over a fresh, empty database (lifespan runs on enter)."""
    from fastapi.testclient import TestClient

    from app.core.config import get_settings
    from app.main import app

    db_path = Path(get_settings().database_path)
    if db_path.exists():
        db_path.unlink()
    with TestClient(app) as test_client:
        yield test_client
