"""CLI entry point for Courseboard."""

from __future__ import annotations

import sys
from pathlib import Path

import click
import uvicorn

from courseboard import __version__
from courseboard.config import ConfigError, Settings, load_settings
from courseboard.logging import forward_server_logs, get_logger, setup_logging
from courseboard.state_store import StateStore, StateStoreError

logger = get_logger("cli")

config_option = click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to courseboard.yaml (auto-detected if not specified)",
)


def _load(config_path: Path | None) -> Settings:
    try:
        return load_settings(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Courseboard - course enrollment, points and recommendations."""
    pass


@main.command()
@config_option
@click.option("--host", default=None, help="Bind address (default: from config)")
@click.option("--port", type=int, default=None, help="Port (default: from config)")
def serve(config_path: Path | None, host: str | None, port: int | None) -> None:
    """Run the REST API server."""
    from courseboard.api import create_app

    settings = _load(config_path)
    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port

    setup_logging(settings)
    forward_server_logs()
    logger.info("Starting API on %s:%d (db=%s)", settings.host, settings.port, settings.db_path)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


@main.command("init-db")
@config_option
def init_db(config_path: Path | None) -> None:
    """Create the database tables if they don't exist."""
    settings = _load(config_path)
    setup_logging(settings, console=False)

    try:
        store = StateStore(settings.db_path)
    except StateStoreError as e:
        click.echo(f"Database error: {e}", err=True)
        sys.exit(1)
    store.close()

    logger.info("Initialized database at %s", settings.db_path)
    click.echo(f"Initialized database at {settings.db_path}")
