from __future__ import annotations

from typing import NoReturn, Optional

import click
import typer

from cli.config import load_emitter_config, load_receiver_config
from cli.render import render_reading, render_reading_json
from logging_config import configure_logging
from services.emitter import EmitterSession
from services.receiver import ReceiverService
from services.sensor import SimulatedSensor
from transport.udp import TransportError, UdpTransport, resolve

app = typer.Typer(
    help="Send and receive 8-byte temperature readings over UDP.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(exc: TransportError) -> NoReturn:
    typer.secho(f"error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level for stderr diagnostics (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)


@app.command("emit")
def emit_command(
    host: Optional[str] = typer.Argument(
        None, help="Destination host (defaults to TELEMETRY_HOST env or 127.0.0.1)."
    ),
    port: Optional[int] = typer.Argument(
        None, min=1, max=65535, help="Destination port (defaults to TELEMETRY_PORT env or 5005)."
    ),
    interval: Optional[float] = typer.Argument(
        None, click_type=click.FloatRange(min=0.0, min_open=True), help="Seconds between readings (defaults to TELEMETRY_INTERVAL env or 1.0)."
    ),
    count: Optional[int] = typer.Option(
        None, "--count", "-n", min=1, help="Stop after sending this many readings."
    ),
) -> None:
    """Periodically send simulated readings to HOST:PORT."""
    config = load_emitter_config(host=host, port=port, interval=interval)
    try:
        destination = resolve(config.host, config.port)
        with UdpTransport.for_address(destination) as transport:
            typer.echo(f"Sending readings to {destination} every {config.interval}s ...")
            session = EmitterSession(
                transport,
                destination,
                sensor=SimulatedSensor(),
                interval=config.interval,
            )
            sent = session.run(count=count)
    except TransportError as exc:
        _fail(exc)
    typer.echo(f"Sent {sent} readings.")


@app.command("listen")
def listen_command(
    port: Optional[int] = typer.Argument(
        None, min=0, max=65535, help="Port to listen on (defaults to TELEMETRY_PORT env or 5005)."
    ),
    bind: Optional[str] = typer.Option(
        None, "--bind", "-b", help="Address to bind (defaults to TELEMETRY_BIND_HOST env or 0.0.0.0)."
    ),
    json_output: bool = typer.Option(
        False, "--json/--text", help="Print one JSON object per reading."
    ),
    count: Optional[int] = typer.Option(
        None, "--count", "-n", min=1, help="Stop after receiving this many datagrams."
    ),
) -> None:
    """Receive, validate and display readings."""
    config = load_receiver_config(port=port, bind_host=bind)
    presenter = render_reading_json if json_output else render_reading
    try:
        with UdpTransport.listen(
            config.bind_host, config.port, buffer_size=config.buffer_size
        ) as transport:
            typer.echo(f"Listening on port {transport.local_address.port}...", err=json_output)
            stats = ReceiverService(transport, presenter).run(count=count)
    except TransportError as exc:
        _fail(exc)
    typer.echo(
        f"Received {stats.received} datagrams ({stats.discarded} discarded, {stats.invalid} invalid).",
        err=json_output,
    )
