"""
Main CLI application using Typer with router-based command dispatch.

All command groups are registered through the centralized CliRouter.
"""

from __future__ import annotations

import typer

from ..infra.logging import configure_logging
from .commands import engine, station
from .router import get_router

app = typer.Typer(help="RadioCore operator CLI")

router = get_router(app)

router.register(
    "station",
    station.app,
    help_text="Engine program synthesis and station port layout",
)

router.register(
    "engine",
    engine.app,
    help_text="Runtime commands against a running station engine",
)


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override LOG_LEVEL for this run"),
):
    """RadioCore - audio engine program synthesis and control."""
    configure_logging(log_level)


def cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
