"""Write path: validate an inbound reading and append it to the store."""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional

from models.records import Reading
from services.errors import ReadingValidationError
from storage.errors import StoreError
from storage.sqlite_store import ReadingStore

logger = logging.getLogger(__name__)

# Query parameter name -> Reading attribute, in insert order.
READING_FIELDS = (
    ("lat", "latitude"),
    ("lng", "longitude"),
    ("temp", "temperature"),
    ("humidity", "humidity"),
    ("air", "air_quality"),
    ("noise", "noise"),
)


def _parse_float(name: str, raw: Optional[str]) -> float:
    candidate = (raw or "").strip()
    if not candidate:
        raise ReadingValidationError(name, f"missing value for {name}")
    if not candidate.isascii() or "_" in candidate:
        raise ReadingValidationError(name, f"invalid numeric value for {name}: {raw!r}")
    try:
        value = float(candidate)
    except ValueError as exc:
        raise ReadingValidationError(name, f"invalid numeric value for {name}: {raw!r}") from exc
    if not math.isfinite(value):
        raise ReadingValidationError(name, f"non-finite value for {name}: {raw!r}")
    return value


def parse_reading(params: Mapping[str, Optional[str]]) -> Reading:
    """Coerce the six string parameters into a typed :class:`Reading`."""
    values = {
        attribute: _parse_float(name, params.get(name)) for name, attribute in READING_FIELDS
    }
    return Reading(**values)


class IngestionHandler:
    """Persists readings through the store's server-timestamp insert."""

    def __init__(self, store: ReadingStore) -> None:
        self.store = store

    def ingest(self, params: Mapping[str, Optional[str]]) -> int:
        try:
            reading = parse_reading(params)
        except ReadingValidationError as exc:
            logger.warning(
                "Rejected reading",
                extra={"field": exc.field, "reason": str(exc)},
            )
            raise

        try:
            row_id = self.store.insert(reading)
        except StoreError as exc:
            logger.warning("Could not create data", extra={"reason": str(exc)})
            raise

        logger.debug("Stored reading %s", row_id)
        return row_id
