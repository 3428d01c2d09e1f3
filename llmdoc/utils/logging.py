"""Logging setup for llmdoc.

Library modules log through ``logging.getLogger(__name__)`` children of
the ``llmdoc`` logger and stay silent (NullHandler) until the CLI calls
``configure_logging`` with the ``logging`` section of the config file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from llmdoc.utils.config import LoggingConfig

LOGGER_NAME = "llmdoc"


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _reset_handlers(target: logging.Logger) -> None:
    for handler in list(target.handlers):
        target.removeHandler(handler)
        handler.close()


def configure_logging(
    config: Optional[LoggingConfig] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """Route package log records to stdout and, optionally, a log file.

    Calling this again replaces the handlers installed by the previous
    call, closing any open log file.

    Args:
        config: The ``logging`` config section. Defaults apply if None.
        level: Level name overriding ``config.level``, e.g. from
            ``--verbose``. Unknown names fall back to INFO.

    Returns:
        The ``llmdoc`` logger.
    """
    config = config or LoggingConfig()
    package_logger = logging.getLogger(LOGGER_NAME)
    _reset_handlers(package_logger)

    numeric_level = _resolve_level(level or config.level)
    package_logger.setLevel(numeric_level)
    formatter = logging.Formatter(config.format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.debug(
        "Logging configured: level=%s file=%s",
        logging.getLevelName(numeric_level),
        config.file or "-",
    )
    return package_logger
