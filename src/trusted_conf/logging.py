from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from trusted_conf.config.models import LoggingSettings

_HANDLER_PREFIX = "trusted_conf."

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level}")
    return value


def init_logging(settings: LoggingSettings) -> logging.Logger:
    """
    Configure the root logger from settings.

    Installs a stderr handler and, if configured, a daily rotating file handler.
    Handlers installed by an earlier call are closed and replaced; handlers owned by
    anyone else are left alone.
    """
    level = _resolve_level(settings.level)
    root = logging.getLogger()

    for handler in list(root.handlers):
        if (handler.get_name() or "").startswith(_HANDLER_PREFIX):
            root.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.set_name(_HANDLER_PREFIX + "console")
    console.setFormatter(_FORMATTER)
    root.addHandler(console)

    if settings.file is not None:
        log_path = Path(settings.file.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_path,
            when="midnight",
            backupCount=settings.file.rotation.backup_count,
            encoding="utf-8",
        )
        file_handler.set_name(_HANDLER_PREFIX + "file")
        file_handler.setFormatter(_FORMATTER)
        root.addHandler(file_handler)

    root.setLevel(level)
    return root
