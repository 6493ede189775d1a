from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import typer
from sqlalchemy.orm import Session

from ...infra.uow import session
from ...usecases import engine_control as _uc_engine

app = typer.Typer(name="engine", help="Runtime commands against a running station engine")


def _run(json_output: bool, action: Callable[[Session], dict[str, Any]]) -> None:
    with session() as db:
        try:
            result = action(db)
        except Exception as e:
            if json_output:
                typer.echo(json.dumps({"status": "error", "error": str(e)}, indent=2))
            else:
                typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps({"status": "ok", **result}, indent=2))
    else:
        for line in result["response"]:
            typer.echo(line)


@app.command("command")
def command(
    station_id: int = typer.Argument(..., help="Station id"),
    text: str = typer.Argument(..., help="Control command (URL-encoded text is decoded)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Send a raw control command."""
    _run(json_output, lambda db: _uc_engine.send_command(db, station_id, text))


@app.command("skip")
def skip(
    station_id: int = typer.Argument(..., help="Station id"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Skip the currently playing track."""
    _run(json_output, lambda db: _uc_engine.skip_track(db, station_id))


@app.command("queue")
def queue(
    station_id: int = typer.Argument(..., help="Station id"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Show pending manual requests."""
    _run(json_output, lambda db: _uc_engine.show_queue(db, station_id))


@app.command("request")
def request(
    station_id: int = typer.Argument(..., help="Station id"),
    music_file: str = typer.Argument(..., help="Track path or URI to enqueue"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Enqueue a manual request; fails while another request is pending."""
    _run(json_output, lambda db: _uc_engine.request_track(db, station_id, music_file))


@app.command("disconnect")
def disconnect(
    station_id: int = typer.Argument(..., help="Station id"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Disconnect the live streamer."""
    _run(json_output, lambda db: _uc_engine.disconnect_streamer(db, station_id))


@app.command("reload-playlist")
def reload_playlist(
    station_id: int = typer.Argument(..., help="Station id"),
    playlist_id: int = typer.Argument(..., help="Playlist id"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Ask the engine to re-read a playlist's manifest."""
    _run(json_output, lambda db: _uc_engine.reload_playlist(db, station_id, playlist_id))
