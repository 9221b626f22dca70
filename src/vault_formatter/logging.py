from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from vault_formatter.config.models import LoggingSettings
from vault_formatter.settings.models import LogLevel

PACKAGE_LOGGER = "vault_formatter"

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    # Above CRITICAL, so nothing from the package gets through.
    LogLevel.SILENT: logging.CRITICAL + 10,
}


def init_logging(settings: LoggingSettings) -> None:
    """Configure root handlers once at process start."""
    root = logging.getLogger()
    root.setLevel(settings.level.upper())
    for handler in list(root.handlers):
        if getattr(handler, "_vault_formatter_handler", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console._vault_formatter_handler = True  # type: ignore[attr-defined]
    root.addHandler(console)

    if settings.file.path:
        log_path = Path(settings.file.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_path,
            when="midnight",
            backupCount=settings.file.rotation.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler._vault_formatter_handler = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)


def apply_log_level(level: LogLevel, logger: logging.Logger | None = None) -> None:
    """Apply the plugin-level verbosity to the package logger."""
    target = logger or logging.getLogger(PACKAGE_LOGGER)
    target.setLevel(_LEVELS[LogLevel(level)])
