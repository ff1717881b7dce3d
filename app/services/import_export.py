"""Import / export of the whole State as JSON."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from app.core.constants import EXPORT_INDENT
from app.core.enums import ImportStatus, PayloadShape
from app.schemas.state import State
from app.services.normalizer import classify_payload
from app.services.ordering import replace_state

logger = logging.getLogger(__name__)

UNPARSEABLE_MESSAGE = "Failed to parse JSON file."
INVALID_FORMAT_MESSAGE = "Invalid JSON format."
IMPORTED_MESSAGE = "Data imported successfully!"


@dataclass(frozen=True)
class ImportResult:
    """Outcome of an import. ``state`` is only set when ``status`` is OK."""

    status: ImportStatus
    message: str
    state: State | None = None
    shape: PayloadShape = PayloadShape.INVALID

    @property
    def ok(self) -> bool:
        return self.status is ImportStatus.OK


def export_state(state: State) -> str:
    """Pretty-printed JSON of exercises, groups and settings."""
    return json.dumps(state.to_raw(), indent=EXPORT_INDENT, ensure_ascii=False)


def import_payload(state: State, payload: Any) -> ImportResult:
    """Route an already-decoded value through ``replace_state``."""
    shape = classify_payload(payload)
    if shape is PayloadShape.INVALID:
        logger.info("Import rejected: payload is neither a list nor {exercises, groups}")
        return ImportResult(ImportStatus.INVALID_FORMAT, INVALID_FORMAT_MESSAGE, shape=shape)
    return ImportResult(
        ImportStatus.OK, IMPORTED_MESSAGE, state=replace_state(state, payload), shape=shape
    )


def parse_import(state: State, text: str | bytes) -> ImportResult:
    """Decode and import JSON text; never raises."""
    try:
        payload = json.loads(text)
    except (ValueError, TypeError):
        logger.info("Import rejected: body is not valid JSON")
        return ImportResult(ImportStatus.UNPARSEABLE, UNPARSEABLE_MESSAGE)
    return import_payload(state, payload)
