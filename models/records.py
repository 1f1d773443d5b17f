"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Metric(str, Enum):
    """Metrics a read request can ask for, keyed by their query name."""

    temperature = "temp"
    humidity = "humidity"
    air_quality = "air"
    noise = "noise"

    @property
    def column(self) -> str:
        return _METRIC_COLUMNS[self]


_METRIC_COLUMNS = {
    Metric.temperature: "temperature",
    Metric.humidity: "humidity",
    Metric.air_quality: "airQuality",
    Metric.noise: "noise",
}


class BoundaryPolicy(str, Enum):
    """How the end points of an hour bucket are compared."""

    inclusive = "inclusive"
    half_open = "half_open"


@dataclass(slots=True, frozen=True)
class Reading:
    """A single sensor observation ready to be persisted."""

    latitude: float
    longitude: float
    temperature: float
    humidity: float
    air_quality: float
    noise: float

    def values(self) -> tuple[float, float, float, float, float, float]:
        return (
            self.latitude,
            self.longitude,
            self.temperature,
            self.humidity,
            self.air_quality,
            self.noise,
        )


@dataclass(slots=True, frozen=True)
class TimeWindow:
    """One-hour bucket expressed as store-formatted timestamps."""

    start: str
    end: str
    policy: BoundaryPolicy = BoundaryPolicy.inclusive
