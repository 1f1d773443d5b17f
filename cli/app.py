from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import typer
import uvicorn

from app.main import create_app
from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_records
from logging_config import build_logging_config, configure_logging
from services.errors import StartupError
from services.readings import initialize_service
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Serve and query the urban sensor data API.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="API base URL (defaults to API_BASE_URL env or http://localhost:8080).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each API request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("serve")
def serve_command(
    test: Optional[bool] = typer.Option(
        None,
        "--test/--no-test",
        help="Recreate test.db and fill it with synthetic readings before serving.",
    ),
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind."),
    port: Optional[int] = typer.Option(None, "--port", help="Port to bind."),
) -> None:
    """Open the database and serve the HTTP API."""
    settings = get_settings()
    settings = replace(
        settings,
        test_mode=settings.test_mode if test is None else test,
        host=host or settings.host,
        port=port or settings.port,
    )
    configure_logging(settings.log_level)
    if settings.test_mode:
        typer.echo("Initializing in TEST mode")

    try:
        service = initialize_service(settings)
    except StartupError as exc:
        typer.secho(f"Startup failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    api = create_app(service=service, settings=settings)
    try:
        uvicorn.run(
            api,
            host=settings.host,
            port=settings.port,
            log_config=build_logging_config(settings.log_level),
        )
    finally:
        service.close()


@app.command("push")
def push_command(
    ctx: typer.Context,
    lat: float = typer.Option(..., "--lat", help="Latitude."),
    lng: float = typer.Option(..., "--lng", help="Longitude."),
    temp: float = typer.Option(0.0, "--temp", help="Temperature in Celsius."),
    humidity: float = typer.Option(0.0, "--humidity", help="Relative humidity in percent."),
    air: float = typer.Option(0.0, "--air", help="Air quality index."),
    noise: float = typer.Option(0.0, "--noise", help="Noise level in dB."),
) -> None:
    """Send one reading to the API."""
    state = _get_state(ctx)
    message = state.client.post_reading(
        {
            "lat": lat,
            "lng": lng,
            "temp": temp,
            "humidity": humidity,
            "air": air,
            "noise": noise,
        }
    )
    typer.secho(message, fg=typer.colors.GREEN)


@app.command("fetch")
def fetch_command(
    ctx: typer.Context,
    data_type: str = typer.Argument(..., help="Metric to fetch: temp, humidity, air or noise."),
    date: str = typer.Option(..., "--date", help="Day formatted as YYYY-MM-DD."),
    hour: int = typer.Option(..., "--hour", min=0, max=23, help="Bucket end hour."),
) -> None:
    """Fetch one metric for the hour bucket ending at DATE HOUR:00."""
    state = _get_state(ctx)
    records = state.client.get_data(data_type, date, hour)
    render_records(records, data_type=data_type, date=date, hour=hour)


if __name__ == "__main__":
    app()
