"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.app_state import AppState

__all__ = [
    "AppState",
]
