"""Service object wiring the reading store to the read and write paths."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional

from app.schemas import DataRecord
from models.records import BoundaryPolicy
from services.errors import StartupError
from services.ingestion import IngestionHandler
from services.query import QueryHandler
from services.seeding import seed_store
from settings import Settings, get_settings
from storage.errors import StoreError
from storage.sqlite_store import ReadingStore

logger = logging.getLogger(__name__)


class ReadingService:
    """Owns the shared store handle; built once at startup and passed to routes."""

    def __init__(
        self,
        store: ReadingStore,
        policy: BoundaryPolicy = BoundaryPolicy.inclusive,
    ) -> None:
        self.store = store
        self.ingestion = IngestionHandler(store)
        self.queries = QueryHandler(store, policy=policy)

    def store_reading(self, params: Mapping[str, Optional[str]]) -> int:
        return self.ingestion.ingest(params)

    def read_bucket(
        self,
        data_type: Optional[str],
        date: Optional[str],
        hour: Optional[str],
    ) -> List[DataRecord]:
        return self.queries.query(data_type, date, hour)

    def close(self) -> None:
        """Release the store connection during application shutdown."""
        self.store.close()


def initialize_service(settings: Optional[Settings] = None) -> ReadingService:
    """Open the configured database; in test mode recreate and seed it first.

    Raises :class:`StartupError` when the store cannot be prepared.
    """
    settings = settings or get_settings()
    mode = "test" if settings.test_mode else "production"
    db_path = settings.active_database_path
    logger.info("Initializing reading store", extra={"mode": mode, "db_path": db_path})

    try:
        store = ReadingStore.open(
            db_path,
            policy=settings.boundary_policy,
            fresh=settings.test_mode,
        )
    except StoreError as exc:
        logger.error("Reading store initialization failed", extra={"reason": str(exc)})
        raise StartupError(str(exc)) from exc

    if settings.test_mode:
        try:
            seed_store(store, count=settings.seed_rows)
        except StoreError as exc:
            store.close()
            logger.error("Test data generation failed", extra={"reason": str(exc)})
            raise StartupError(str(exc)) from exc

    logger.info("Serving readings", extra={"mode": mode, "row_count": store.count()})
    return ReadingService(store, policy=settings.boundary_policy)
