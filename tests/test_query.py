from __future__ import annotations

from pathlib import Path

import pytest

from app.schemas import DataRecord
from models.records import BoundaryPolicy, Metric, Reading
from services.errors import UnknownMetricError, WindowError
from services.query import QueryHandler, parse_metric, to_records
from storage.errors import StoreError
from storage.sqlite_store import ReadingStore


def _reading() -> Reading:
    return Reading(
        latitude=39.47,
        longitude=-0.38,
        temperature=22.5,
        humidity=60.0,
        air_quality=40.0,
        noise=55.0,
    )


@pytest.fixture()
def store(tmp_path: Path):
    store = ReadingStore.open(tmp_path / "urban.db")
    store.insert_many_at([(_reading(), "2024-03-01 14:30:00")])
    yield store
    store.close()


@pytest.mark.parametrize(
    ("data_type", "expected"),
    [("temp", 22.5), ("humidity", 60.0), ("air", 40.0), ("noise", 55.0)],
)
def test_each_metric_selects_its_column(store: ReadingStore, data_type: str, expected: float) -> None:
    handler = QueryHandler(store)

    records = handler.query(data_type, "2024-03-01", "15")

    assert records == [
        DataRecord(lat=39.47, lng=-0.38, timestamp="2024-03-01 14:30:00", value=expected)
    ]


def test_empty_bucket_returns_empty_list(store: ReadingStore) -> None:
    assert QueryHandler(store).query("temp", "2024-03-01", "10") == []


def test_repeated_reads_return_same_records(store: ReadingStore) -> None:
    handler = QueryHandler(store)

    assert handler.query("noise", "2024-03-01", "15") == handler.query("noise", "2024-03-01", "15")


@pytest.mark.parametrize("data_type", ["pressure", "", None, "TEMP", "temperature"])
def test_unknown_metric_is_an_error(store: ReadingStore, data_type) -> None:
    with pytest.raises(UnknownMetricError):
        QueryHandler(store).query(data_type, "2024-03-01", "15")


def test_parse_metric_maps_query_names() -> None:
    assert parse_metric("air") is Metric.air_quality
    assert Metric.air_quality.column == "airQuality"


def test_malformed_hour_is_an_error(store: ReadingStore) -> None:
    with pytest.raises(WindowError):
        QueryHandler(store).query("temp", "2024-03-01", "fifteen")


def test_half_open_handler_excludes_end_boundary(tmp_path: Path) -> None:
    store = ReadingStore.open(tmp_path / "half.db", policy=BoundaryPolicy.half_open)
    try:
        store.insert_many_at([(_reading(), "2024-03-01 15:00:00")])
        handler = QueryHandler(store, policy=BoundaryPolicy.half_open)

        assert handler.query("temp", "2024-03-01", "15") == []
        assert len(handler.query("temp", "2024-03-01", "16")) == 1
    finally:
        store.close()


def test_unreadable_row_aborts_the_whole_request() -> None:
    rows = [
        (39.47, -0.38, "2024-03-01 14:30:00", 22.5),
        (39.48, -0.39, "2024-03-01 14:31:00", "not-a-number"),
    ]

    with pytest.raises(StoreError, match="2024-03-01 14:31:00"):
        to_records(rows)
