from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from logging_config import configure_logging
from services.readings import ReadingService, initialize_service
from settings import Settings, get_settings


def _cors_headers(settings: Settings, origin: Optional[str]) -> Dict[str, str]:
    headers = {
        "Access-Control-Allow-Methods": ", ".join(settings.cors_methods),
        "Access-Control-Allow-Headers": ", ".join(settings.cors_headers),
    }
    if "*" in settings.cors_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in settings.cors_origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


def create_app(
    service: Optional[ReadingService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the API; without ``service`` the store is opened on startup."""
    configure_logging()
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = app.state.service is None
        if owned:
            app.state.service = initialize_service(settings)
        try:
            yield
        finally:
            if owned:
                app.state.service.close()
                app.state.service = None

    app = FastAPI(
        title="Urban Sensor Server",
        description="Stores environmental sensor readings and serves hourly buckets per metric.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.service = service

    # Answers preflight OPTIONS requests; simple responses are stamped below.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=list(settings.cors_methods),
        allow_headers=list(settings.cors_headers),
    )

    # Outermost, so its headers win on every response, Origin header or not.
    @app.middleware("http")
    async def apply_cors_headers(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        response.headers.update(_cors_headers(settings, request.headers.get("origin")))
        return response

    app.include_router(router)
    return app

app = create_app()
