"""Read path: resolve the bucket, run the metric query, shape the records."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from app.schemas import DataRecord
from models.records import BoundaryPolicy, Metric
from services.errors import UnknownMetricError
from services.window import resolve_window
from storage.errors import StoreError
from storage.sqlite_store import MetricRow, ReadingStore

logger = logging.getLogger(__name__)


def parse_metric(data_type: Optional[str]) -> Metric:
    candidate = (data_type or "").strip()
    try:
        return Metric(candidate)
    except ValueError as exc:
        allowed = ", ".join(metric.value for metric in Metric)
        raise UnknownMetricError(
            f"unknown data_type {data_type!r}; expected one of: {allowed}"
        ) from exc


def to_records(rows: Iterable[MetricRow]) -> List[DataRecord]:
    """Map store rows onto response records, failing on the first bad row."""
    records: List[DataRecord] = []
    for latitude, longitude, timestamp, value in rows:
        try:
            records.append(
                DataRecord(lat=latitude, lng=longitude, timestamp=timestamp, value=value)
            )
        except ValueError as exc:
            raise StoreError(f"Could not read row at {timestamp!r}: {exc}") from exc
    return records


class QueryHandler:
    """Serves one metric over one hour bucket."""

    def __init__(
        self,
        store: ReadingStore,
        policy: BoundaryPolicy = BoundaryPolicy.inclusive,
    ) -> None:
        self.store = store
        self.policy = policy

    def query(
        self,
        data_type: Optional[str],
        date: Optional[str],
        hour: Optional[str],
    ) -> List[DataRecord]:
        metric = parse_metric(data_type)
        window = resolve_window(date, hour, self.policy)
        context = {
            "metric": metric.value,
            "window_start": window.start,
            "window_end": window.end,
        }

        try:
            records = to_records(self.store.select_window(metric, window))
        except StoreError as exc:
            logger.warning("Read failed", extra={**context, "reason": str(exc)})
            raise

        logger.debug("Read completed", extra={**context, "row_count": len(records)})
        return records
