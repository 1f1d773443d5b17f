"""Resolution of a ``date`` + ``hour`` selector into an hour bucket."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Optional

from models.records import TIMESTAMP_FORMAT, BoundaryPolicy, TimeWindow
from services.errors import WindowError

_DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_BUCKET = timedelta(hours=1)


def parse_hour(value: Optional[str]) -> int:
    candidate = (value or "").strip()
    if not candidate:
        raise WindowError("hour is required.")
    if not (candidate.isascii() and candidate.isdigit()):
        raise WindowError(f"hour must be an integer, got {value!r}.")
    hour = int(candidate)
    if not 0 <= hour <= 23:
        raise WindowError(f"hour must be between 0 and 23, got {hour}.")
    return hour


def parse_date(value: Optional[str]) -> datetime:
    candidate = (value or "").strip()
    if not candidate:
        raise WindowError("date is required.")
    if not _DATE_PATTERN.fullmatch(candidate):
        raise WindowError(f"date must use the YYYY-MM-DD format, got {value!r}.")
    try:
        return datetime.strptime(candidate, _DATE_FORMAT)
    except ValueError as exc:
        raise WindowError(f"date must use the YYYY-MM-DD format, got {value!r}.") from exc


def resolve_window(
    date: Optional[str],
    hour: Optional[str],
    policy: BoundaryPolicy = BoundaryPolicy.inclusive,
) -> TimeWindow:
    """Return the one-hour bucket ending at ``hour:00:00`` on ``date``.

    The bucket for hour 0 starts at 23:00:00 on the previous day. Whether a
    reading stamped exactly on either end point is included depends on
    ``policy``; with the inclusive policy it belongs to both adjacent buckets.
    """
    end = parse_date(date) + timedelta(hours=parse_hour(hour))
    start = end - _BUCKET
    return TimeWindow(
        start=start.strftime(TIMESTAMP_FORMAT),
        end=end.strftime(TIMESTAMP_FORMAT),
        policy=policy,
    )
