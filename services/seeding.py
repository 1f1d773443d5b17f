"""Synthetic readings used to populate the test database."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator, Optional, Tuple

from models.records import TIMESTAMP_FORMAT, Reading
from storage.sqlite_store import ReadingStore

logger = logging.getLogger(__name__)

DEFAULT_SEED_ROWS = 10_000
TRAILING_WINDOW = timedelta(days=5)


@dataclass(frozen=True)
class BoundingBox:
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float


# Valencia
DEFAULT_AREA = BoundingBox(
    min_latitude=39.40,
    max_latitude=39.50,
    min_longitude=-0.45,
    max_longitude=-0.32,
)

MAX_TEMPERATURE = 40.0
MAX_HUMIDITY = 100.0
MAX_AIR_QUALITY = 100.0
MAX_NOISE = 100.0


def generate_readings(
    count: int = DEFAULT_SEED_ROWS,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    area: BoundingBox = DEFAULT_AREA,
) -> Iterator[Tuple[Reading, str]]:
    """Yield ``count`` readings uniform over ``area`` and the trailing five days."""
    rng = rng or random.Random()
    reference = now or datetime.now()
    window_seconds = int(TRAILING_WINDOW.total_seconds())

    for _ in range(count):
        reading = Reading(
            latitude=rng.uniform(area.min_latitude, area.max_latitude),
            longitude=rng.uniform(area.min_longitude, area.max_longitude),
            temperature=rng.random() * MAX_TEMPERATURE,
            humidity=rng.random() * MAX_HUMIDITY,
            air_quality=rng.random() * MAX_AIR_QUALITY,
            noise=rng.random() * MAX_NOISE,
        )
        offset = timedelta(seconds=rng.randrange(window_seconds))
        yield reading, (reference - offset).strftime(TIMESTAMP_FORMAT)


def seed_store(
    store: ReadingStore,
    count: int = DEFAULT_SEED_ROWS,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """Insert synthetic readings in a single transaction.

    Any failing row rolls the whole batch back and raises ``StoreError``.
    """
    logger.info("Generating test data", extra={"row_count": count})
    rows = generate_readings(count=count, now=now, rng=rng)
    return store.insert_many_at(rows)
