"""Request-level errors raised by the read and write paths."""

from __future__ import annotations


class ReadingValidationError(ValueError):
    """An inbound reading field is missing or not a finite number."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class WindowError(ValueError):
    """The ``date``/``hour`` selector does not describe a valid bucket."""


class UnknownMetricError(ValueError):
    """The requested ``data_type`` is not one of the served metrics."""


class StartupError(RuntimeError):
    """The service could not be initialized and must not serve traffic."""
