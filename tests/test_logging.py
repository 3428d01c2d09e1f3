"""Tests for logging setup."""

import logging
from pathlib import Path

from llmdoc.utils.config import LoggingConfig
from llmdoc.utils.logging import LOGGER_NAME, configure_logging


class TestConfigureLogging:
    """Tests for the configure_logging function."""

    def test_returns_package_logger(self) -> None:
        logger = configure_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == LOGGER_NAME == "llmdoc"

    def test_default_level_is_info(self) -> None:
        assert configure_logging().level == logging.INFO

    def test_level_from_config(self) -> None:
        assert configure_logging(LoggingConfig(level="warning")).level == logging.WARNING

    def test_override_wins_over_config(self) -> None:
        logger = configure_logging(LoggingConfig(level="WARNING"), level="DEBUG")
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert configure_logging(level="CHATTY").level == logging.INFO

    def test_console_only_by_default(self) -> None:
        handler_types = [type(h) for h in configure_logging().handlers]
        assert handler_types == [logging.StreamHandler]

    def test_file_handler_creates_parent(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "llmdoc.log"
        logger = configure_logging(LoggingConfig(file=str(log_file)))
        assert logging.FileHandler in [type(h) for h in logger.handlers]
        assert log_file.parent.is_dir()

    def test_reconfigure_replaces_handlers(self, tmp_path: Path) -> None:
        first = configure_logging(LoggingConfig(file=str(tmp_path / "a.log")))
        file_handler = next(h for h in first.handlers if isinstance(h, logging.FileHandler))

        second = configure_logging()

        assert len(second.handlers) == 1
        assert file_handler.stream is None

    def test_child_loggers_reach_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "llmdoc.log"
        logger = configure_logging(
            LoggingConfig(format="%(levelname)s %(message)s", file=str(log_file))
        )
        logging.getLogger("llmdoc.scanner.files").info("scanned %d files", 3)
        for handler in logger.handlers:
            handler.flush()
        assert "INFO scanned 3 files" in log_file.read_text(encoding="utf-8")
