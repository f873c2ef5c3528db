"""Unit tests for Courseboard logging configuration."""

import logging
from pathlib import Path

import pytest

from courseboard.config import Settings
from courseboard.logging import (
    LOG_FILE,
    ROOT_LOGGER,
    forward_server_logs,
    get_logger,
    setup_logging,
)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(log_dir=str(tmp_path / "nested" / "logs"), log_level="INFO")


@pytest.fixture(autouse=True)
def reset_handlers():
    yield
    for name in (ROOT_LOGGER, "uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True


def _log_text(settings: Settings) -> str:
    return (Path(settings.log_dir) / LOG_FILE).read_text()


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_creates_log_directory(self, settings: Settings) -> None:
        """Log directory is created if it doesn't exist."""
        setup_logging(settings, console=False)

        assert Path(settings.log_dir).is_dir()

    def test_writes_formatted_lines(self, settings: Settings) -> None:
        logger = setup_logging(settings, console=False)
        logger.info("test message 123")

        content = _log_text(settings)
        assert "| INFO     | courseboard | test message 123" in content

    def test_module_loggers_share_the_file(self, settings: Settings) -> None:
        """Loggers named after package modules end up in the same file."""
        setup_logging(settings, console=False)
        logging.getLogger("courseboard.learning.lifecycle").info("video completed")

        assert "courseboard.learning.lifecycle | video completed" in _log_text(settings)

    def test_level_filters(self, settings: Settings) -> None:
        settings.log_level = "WARNING"
        logger = setup_logging(settings, console=False)
        logger.info("hidden")
        logger.warning("shown")

        content = _log_text(settings)
        assert "hidden" not in content
        assert "shown" in content

    def test_unknown_level_falls_back_to_info(self, settings: Settings) -> None:
        settings.log_level = "chatty"

        assert setup_logging(settings, console=False).level == logging.INFO

    def test_no_duplicate_handlers(self, settings: Settings) -> None:
        """Calling setup twice replaces handlers instead of adding more."""
        setup_logging(settings, console=True)
        logger = setup_logging(settings, console=True)

        assert len(logger.handlers) == 2

    def test_quiets_sqlalchemy(self, settings: Settings) -> None:
        setup_logging(settings, console=False)

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_debug_keeps_sqlalchemy_verbose(self, settings: Settings) -> None:
        settings.log_level = "DEBUG"
        setup_logging(settings, console=False)

        assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG

    def test_settings_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("COURSEBOARD_LOG_DIR", str(tmp_path / "envlogs"))
        monkeypatch.setenv("COURSEBOARD_LOG_LEVEL", "DEBUG")

        logger = setup_logging(console=False)

        assert logger.level == logging.DEBUG
        assert (tmp_path / "envlogs" / LOG_FILE).exists()


@pytest.mark.unit
class TestForwardServerLogs:
    """Tests for forward_server_logs."""

    def test_uvicorn_lines_land_in_file(self, settings: Settings) -> None:
        setup_logging(settings, console=False)
        forward_server_logs()

        logging.getLogger("uvicorn.error").warning("server started")

        assert "uvicorn.error | server started" in _log_text(settings)
        assert logging.getLogger("uvicorn.access").propagate is False


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger function."""

    def test_prefixes_name(self) -> None:
        assert get_logger("api").name == "courseboard.api"

    def test_keeps_qualified_name(self) -> None:
        assert get_logger("courseboard.cli").name == "courseboard.cli"
        assert get_logger("courseboard").name == "courseboard"
