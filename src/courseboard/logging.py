"""Logging setup for Courseboard.

All package modules log through ``logging.getLogger(__name__)``, which puts
them under the ``courseboard`` logger configured here. The API server's own
loggers (uvicorn) are routed to the same handlers so one file holds the
request log and the enrollment/points log side by side.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from courseboard.config import Settings

LOG_FILE = "courseboard.log"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "courseboard"

# Loggers that stay at WARNING unless the app itself runs at DEBUG
_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "httpx")


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    settings: Settings | None = None,
    console: bool = True,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
) -> logging.Logger:
    """Install file and console handlers on the ``courseboard`` logger.

    Safe to call more than once: previous handlers are closed and replaced.

    Args:
        settings: Source of ``log_dir`` and ``log_level``. When omitted,
            settings are loaded from courseboard.yaml and COURSEBOARD_* env.
        console: Also log to stderr.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.

    Returns:
        The ``courseboard`` logger.
    """
    if settings is None:
        from courseboard.config import load_settings

        settings = load_settings()

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    level = _level(settings.log_level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for handler in _handlers(log_dir / LOG_FILE, console, max_bytes, backup_count):
        handler.setLevel(level)
        logger.addHandler(handler)

    quiet = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet)

    logger.info(
        "Logging initialized (level=%s, file=%s)",
        logging.getLevelName(level),
        log_dir / LOG_FILE,
    )
    return logger


def _handlers(
    log_path: Path, console: bool, max_bytes: int, backup_count: int
) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def forward_server_logs() -> None:
    """Attach uvicorn's loggers to the courseboard handlers."""
    target = logging.getLogger(ROOT_LOGGER)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        server_logger = logging.getLogger(name)
        server_logger.handlers = list(target.handlers)
        server_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Args:
        name: Component name (e.g. "cli"). Prefixed with "courseboard."
            unless already qualified.

    Returns:
        Logger instance for the component.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
