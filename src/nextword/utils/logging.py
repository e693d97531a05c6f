"""Logging setup shared by the command line and the editor window.

Records always go to a size-capped rotating file under ``~/.nextword/logs``.
The console handler writes to stderr so command line output on stdout stays
machine readable.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path

__all__ = ["LogConfig", "setup_logging", "get_logger", "get_log_path"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
LOG_FILENAME = "nextword.log"

# Third-party loggers never go below WARNING unless the root is stricter.
_QUIET_LOGGERS: tuple[str, ...] = ("asyncio", "PySide6")

_active_path: Path | None = None


@dataclass(slots=True)
class LogConfig:
    """Where and how verbosely to log."""

    level: int = logging.INFO
    log_dir: Path | None = None
    console: bool = True
    max_bytes: int = 1_000_000
    backup_count: int = 3

    def resolved_dir(self) -> Path:
        if self.log_dir is not None:
            return Path(self.log_dir).expanduser()
        override = os.environ.get("NEXTWORD_LOG_DIR")
        if override:
            return Path(override).expanduser()
        return Path.home() / ".nextword" / "logs"

    def build_handlers(self, log_path: Path) -> list[logging.Handler]:
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers: list[logging.Handler] = [file_handler]
        if self.console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            handlers.append(console_handler)
        for handler in handlers:
            handler.setLevel(self.level)
        return handlers


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """Install the rotating file handler (and optional console) on the root logger.

    Repeated calls are no-ops returning the active log file unless ``force`` is
    set, which replaces the previously installed handlers.
    """

    global _active_path
    if _active_path is not None and not force:
        return _active_path

    config = LogConfig(
        level=level,
        log_dir=Path(log_dir) if log_dir is not None else None,
        console=console,
        max_bytes=max_bytes,
        backup_count=backup_count,
    )
    directory = config.resolved_dir()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILENAME

    logging.basicConfig(level=level, handlers=config.build_handlers(log_path), force=True)
    logging.captureWarnings(True)
    quiet_level = max(level, logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    _active_path = log_path
    return log_path


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_log_path() -> Path | None:
    """Return the log file installed by :func:`setup_logging`, if any."""

    return _active_path
