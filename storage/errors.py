"""Exceptions raised by the reading store."""

from __future__ import annotations


class StoreError(RuntimeError):
    """A statement could not be executed against the reading store."""


class StoreInitializationError(StoreError):
    """The store could not be opened, or its schema or statements prepared."""
