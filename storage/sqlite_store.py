from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from threading import Lock
from typing import Iterable, List, Optional, Tuple

from models.records import BoundaryPolicy, Metric, Reading, TimeWindow
from storage.errors import StoreError, StoreInitializationError
from storage.schema import TABLE_NAME, ensure_schema
from storage.statements import StatementRegistry

logger = logging.getLogger(__name__)

MetricRow = Tuple[float, float, str, float]


class ReadingStore:
    """Single shared SQLite connection plus the prepared statement registry."""

    def __init__(
        self,
        connection: sqlite3.Connection,
        statements: StatementRegistry,
        path: Optional[Path] = None,
    ) -> None:
        self.connection = connection
        self.statements = statements
        self.path = path
        self._lock = Lock()

    @classmethod
    def open(
        cls,
        path: str | Path,
        policy: BoundaryPolicy = BoundaryPolicy.inclusive,
        fresh: bool = False,
    ) -> "ReadingStore":
        """Open (or recreate when ``fresh``) the database file and prepare it."""
        db_path = Path(path)
        if fresh:
            try:
                db_path.unlink(missing_ok=True)
            except OSError as exc:
                raise StoreInitializationError(
                    f"Could not remove existing database {db_path}: {exc}"
                ) from exc

        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(db_path, check_same_thread=False)
        except (OSError, sqlite3.Error) as exc:
            raise StoreInitializationError(f"Could not open database {db_path}: {exc}") from exc

        try:
            ensure_schema(connection)
            statements = StatementRegistry.prepare(connection, policy)
        except StoreInitializationError:
            connection.close()
            raise

        logger.info("Reading store ready", extra={"db_path": str(db_path)})
        return cls(connection=connection, statements=statements, path=db_path)

    def insert(self, reading: Reading) -> int:
        """Append a reading stamped with the store's current local time."""
        with self._lock:
            try:
                with self.connection:
                    cursor = self.connection.execute(
                        self.statements.insert_reading, reading.values()
                    )
            except sqlite3.Error as exc:
                raise StoreError(f"Could not create data: {exc}") from exc
        return int(cursor.lastrowid)

    def insert_many_at(self, rows: Iterable[Tuple[Reading, str]]) -> int:
        """Bulk insert timestamped readings inside one transaction."""
        params = [_with_timestamp(reading, timestamp) for reading, timestamp in rows]
        with self._lock:
            try:
                with self.connection:
                    self.connection.executemany(self.statements.insert_reading_at, params)
            except sqlite3.Error as exc:
                raise StoreError(f"Could not insert readings: {exc}") from exc
        return len(params)

    def select_window(self, metric: Metric, window: TimeWindow) -> List[MetricRow]:
        """Return ``(latitude, longitude, timestamp, value)`` rows in storage order."""
        sql = self.statements.select_for(metric)
        with self._lock:
            try:
                rows = self.connection.execute(sql, (window.start, window.end)).fetchall()
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc
        return rows

    def count(self) -> int:
        """Number of stored readings; logged once the store is ready."""
        with self._lock:
            (total,) = self.connection.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()
        return int(total)

    def close(self) -> None:
        with self._lock:
            self.connection.close()


def _with_timestamp(reading: Reading, timestamp: str) -> tuple:
    return (
        reading.latitude,
        reading.longitude,
        timestamp,
        reading.temperature,
        reading.humidity,
        reading.air_quality,
        reading.noise,
    )
