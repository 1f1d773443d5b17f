"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.schemas import DataRecord, HealthStatus, StoreConfirmation
from services.readings import ReadingService
from storage.errors import StoreError

router = APIRouter()


def get_service(request: Request) -> ReadingService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reading store is not initialized.",
        )
    return service


def _bad_request(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# Sync handlers run in the server's worker thread pool, one per request.
@router.post(
    "/data",
    response_model=StoreConfirmation,
    summary="Store a sensor reading passed as query parameters.",
)
def create_data(
    lat: Optional[str] = Query(None, description="Latitude."),
    lng: Optional[str] = Query(None, description="Longitude."),
    temp: Optional[str] = Query(None, description="Temperature in Celsius."),
    humidity: Optional[str] = Query(None, description="Relative humidity in percent."),
    air: Optional[str] = Query(None, description="Air quality index."),
    noise: Optional[str] = Query(None, description="Noise level in dB."),
    service: ReadingService = Depends(get_service),
) -> StoreConfirmation:
    params = {
        "lat": lat,
        "lng": lng,
        "temp": temp,
        "humidity": humidity,
        "air": air,
        "noise": noise,
    }
    try:
        service.store_reading(params)
    except (ValueError, StoreError) as exc:
        raise _bad_request(exc) from exc
    return StoreConfirmation()


@router.get(
    "/data",
    response_model=List[DataRecord],
    summary="Fetch one metric for the hour bucket ending at date + hour.",
)
def read_data(
    data_type: Optional[str] = Query(None, description="One of temp, humidity, air, noise."),
    date: Optional[str] = Query(None, description="Day formatted as YYYY-MM-DD."),
    hour: Optional[str] = Query(None, description="Bucket end hour, 0-23."),
    service: ReadingService = Depends(get_service),
) -> List[DataRecord]:
    try:
        return service.read_bucket(data_type, date, hour)
    except (ValueError, StoreError) as exc:
        raise _bad_request(exc) from exc


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> HealthStatus:
    return HealthStatus()


@router.get(
    "/",
    response_model=HealthStatus,
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> HealthStatus:
    return HealthStatus(detail="See /health for service status.")
