from __future__ import annotations

import json

import typer

from ...infra.uow import session
from ...usecases import station_config_write as _uc_station_config

app = typer.Typer(name="station", help="Engine program synthesis and station port layout")


def _fail(json_output: bool, message: str) -> None:
    if json_output:
        typer.echo(json.dumps({"status": "error", "error": message}, indent=2))
    else:
        typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


@app.command("write-config")
def write_config(
    station_id: int = typer.Argument(..., help="Station id"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Synthesize the station's engine program and write it to disk."""
    with session() as db:
        try:
            result = _uc_station_config.write_station_config(db, station_id)
        except Exception as e:
            _fail(json_output, str(e))

        if json_output:
            typer.echo(json.dumps({"status": "ok", "program": result}, indent=2))
        else:
            typer.echo("Program written:")
            typer.echo(f"  Station: {result['station_name']} ({result['station_id']})")
            typer.echo(f"  Path: {result['path']}")


@app.command("ports")
def ports(
    station_id: int = typer.Argument(..., help="Station id"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Show the public, harbor and control ports derived for a station."""
    with session() as db:
        try:
            result = _uc_station_config.station_ports(db, station_id)
        except Exception as e:
            _fail(json_output, str(e))

        if json_output:
            typer.echo(json.dumps({"status": "ok", "ports": result}, indent=2))
        else:
            typer.echo(f"Station: {result['station_name']} ({result['station_id']})")
            typer.echo(f"  Public: {result['public']}")
            typer.echo(f"  Harbor: {result['harbor']}")
            typer.echo(f"  Control: {result['control']}")
