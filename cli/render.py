from __future__ import annotations

from typing import Any, Iterable

import typer

from models.schemas import ReadingView


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(view: ReadingView) -> None:
    if view.source:
        echo_heading(f"Reading from {view.source}")
    echo_key_values(
        [
            ("ID", view.id),
            ("Timestamp", view.timestamp),
            ("Temperature", view.temperature_label),
            ("Power status", view.power_status.value),
            ("Checksum", f"0x{view.checksum:x} ({view.validity_label})"),
        ]
    )
    typer.echo()


def render_reading_json(view: ReadingView) -> None:
    typer.echo(view.model_dump_json())
