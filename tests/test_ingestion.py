from __future__ import annotations

import logging
from pathlib import Path

import pytest

from models.records import Reading
from services.errors import ReadingValidationError
from services.ingestion import IngestionHandler, parse_reading
from storage.errors import StoreError
from storage.sqlite_store import ReadingStore

VALID_PARAMS = {
    "lat": "39.47",
    "lng": "-0.38",
    "temp": "22.5",
    "humidity": "60",
    "air": "40",
    "noise": "55",
}


@pytest.fixture()
def store(tmp_path: Path):
    store = ReadingStore.open(tmp_path / "urban.db")
    yield store
    store.close()


def test_parse_reading_coerces_all_fields() -> None:
    reading = parse_reading(VALID_PARAMS)

    assert reading == Reading(
        latitude=39.47,
        longitude=-0.38,
        temperature=22.5,
        humidity=60.0,
        air_quality=40.0,
        noise=55.0,
    )


def test_parse_reading_accepts_surrounding_whitespace() -> None:
    params = dict(VALID_PARAMS, temp=" 18 ")

    assert parse_reading(params).temperature == 18.0


@pytest.mark.parametrize("field", ["lat", "lng", "temp", "humidity", "air", "noise"])
def test_missing_field_is_reported_by_name(field: str) -> None:
    params = {key: value for key, value in VALID_PARAMS.items() if key != field}

    with pytest.raises(ReadingValidationError) as exc_info:
        parse_reading(params)

    assert exc_info.value.field == field
    assert f"missing value for {field}" in str(exc_info.value)


@pytest.mark.parametrize("raw", ["warm", "1,5", "nan", "inf", "-inf", "1_000", "\u0661\u0665"])
def test_non_numeric_values_are_rejected(raw: str) -> None:
    with pytest.raises(ReadingValidationError) as exc_info:
        parse_reading(dict(VALID_PARAMS, temp=raw))

    assert exc_info.value.field == "temp"


def test_out_of_range_values_are_stored_as_given(store: ReadingStore) -> None:
    handler = IngestionHandler(store)

    handler.ingest(dict(VALID_PARAMS, humidity="250"))

    (humidity,) = store.connection.execute("SELECT humidity FROM Data").fetchone()
    assert humidity == 250.0


def test_ingest_appends_one_row(store: ReadingStore) -> None:
    handler = IngestionHandler(store)

    row_id = handler.ingest(VALID_PARAMS)

    assert store.count() == 1
    row = store.connection.execute(
        "SELECT latitude, longitude, temperature, humidity, airQuality, noise FROM Data WHERE id = ?",
        (row_id,),
    ).fetchone()
    assert row == (39.47, -0.38, 22.5, 60.0, 40.0, 55.0)


def test_invalid_reading_is_logged_and_not_stored(store: ReadingStore, caplog) -> None:
    handler = IngestionHandler(store)

    with caplog.at_level(logging.WARNING):
        with pytest.raises(ReadingValidationError):
            handler.ingest(dict(VALID_PARAMS, noise="loud"))

    assert store.count() == 0
    records = [record for record in caplog.records if record.name == "services.ingestion"]
    assert records
    assert getattr(records[0], "field", None) == "noise"


def test_store_failure_propagates_as_store_error(store: ReadingStore) -> None:
    handler = IngestionHandler(store)
    store.connection.execute("DROP TABLE Data")

    with pytest.raises(StoreError, match="Could not create data"):
        handler.ingest(VALID_PARAMS)
