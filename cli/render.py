from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_records(
    records: Sequence[Dict[str, Any]],
    data_type: str,
    date: str,
    hour: int,
) -> None:
    echo_heading("Bucket")
    echo_key_values(
        [
            ("data_type", data_type),
            ("date", date),
            ("hour", hour),
            ("records", len(records)),
        ]
    )

    typer.echo()
    echo_heading("Readings")
    if not records:
        typer.echo("No readings in this bucket.")
        return

    for record in records:
        typer.echo(
            f"  - {record.get('timestamp')} "
            f"lat={record.get('lat')} lng={record.get('lng')} value={record.get('value')}"
        )

    values = [record["value"] for record in records if isinstance(record.get("value"), (int, float))]
    if values:
        typer.echo()
        echo_heading("Summary")
        echo_key_values(
            [
                ("min_value", min(values)),
                ("max_value", max(values)),
                ("mean_value", round(sum(values) / len(values), 3)),
            ]
        )
