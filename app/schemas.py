"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class DataRecord(BaseModel):
    """One stored reading reduced to the requested metric."""

    lat: float
    lng: float
    timestamp: str = Field(..., description="Local time formatted as YYYY-MM-DD HH:MM:SS.")
    value: float = Field(..., description="Value of the requested metric.")


class StoreConfirmation(BaseModel):
    """Payload returned after a reading has been persisted."""

    message: str = "Data stored successfully"


class HealthStatus(BaseModel):
    status: str = "ok"
    detail: Optional[str] = None
