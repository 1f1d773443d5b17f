"""Schema for the single ``Data`` table holding every reading."""

from __future__ import annotations

import logging
import sqlite3

from storage.errors import StoreInitializationError

logger = logging.getLogger(__name__)

TABLE_NAME = "Data"

CREATE_SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    latitude FLOAT DEFAULT 0,
    longitude FLOAT DEFAULT 0,
    timestamp TIMESTAMP DEFAULT (strftime('%Y-%m-%d %H:%M:%S', 'now', 'localtime')),
    temperature FLOAT DEFAULT 0,
    humidity FLOAT DEFAULT 0,
    airQuality FLOAT DEFAULT 0,
    noise FLOAT DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_data_timestamp ON {TABLE_NAME}(timestamp);
"""

COLUMNS = (
    "id",
    "latitude",
    "longitude",
    "timestamp",
    "temperature",
    "humidity",
    "airQuality",
    "noise",
)


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create the ``Data`` table and its timestamp index when missing."""
    try:
        with connection:
            connection.executescript(CREATE_SCHEMA_SQL)
    except sqlite3.Error as exc:
        raise StoreInitializationError(f"Could not create table {TABLE_NAME}: {exc}") from exc
    logger.debug("Schema ensured for table %s", TABLE_NAME)

