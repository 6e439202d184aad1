"""Logging for finstore.

Records go to a rich console handler and, when a directory is configured, to
one plain-text file per day, behind a queue listener. Values bound through
``log_context`` prefix every record emitted while they are bound.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from datetime import date
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import TYPE_CHECKING, Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .timing import timeit

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from finstore.core.config import Settings

__all__ = [
    "DailyFileHandler",
    "LoggingConfig",
    "configure_from_settings",
    "init_logging",
    "get_logger",
    "set_level",
    "shutdown_logging",
    "log_context",
    "timeit",
]

CONSOLE_FORMAT = "%(context)s%(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(context)s%(message)s"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    app_name: str = "finstore"
    level: str | int = "INFO"
    log_dir: Optional[Path | str] = None
    console: bool = True
    rich_tracebacks: bool = False
    queue: bool = True

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides: Any) -> "LoggingConfig":
        """Level and log directory from ``Settings``, then ``overrides``."""

        return replace(cls(level=settings.log_level, log_dir=settings.log_dir), **overrides)

    @property
    def numeric_level(self) -> int:
        if isinstance(self.level, int):
            return self.level
        level = logging.getLevelName(str(self.level).upper())
        return level if isinstance(level, int) else logging.INFO


class DailyFileHandler(logging.FileHandler):
    """Append to ``<directory>/<YYYY_MM_DD>.log``, starting a new file each day."""

    def __init__(self, directory: Path | str, *, encoding: str = "utf-8") -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._day = date.today()
        super().__init__(self._file_for(self._day), mode="a", encoding=encoding, delay=True)

    def _file_for(self, day: date) -> str:
        return os.fspath(self.directory / f"{day:%Y_%m_%d}.log")

    def emit(self, record: logging.LogRecord) -> None:
        day = date.fromtimestamp(record.created)
        if day != self._day:
            if self.stream is not None:
                self.stream.close()
                self.stream = None  # type: ignore[assignment]
            self._day = day
            self.baseFilename = self._file_for(day)
        super().emit(record)


_context_filter = ContextFilter()


def _console_handler(cfg: LoggingConfig) -> RichHandler:
    if cfg.rich_tracebacks:
        install_rich_traceback(show_locals=False)
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=cfg.rich_tracebacks,
        show_path=False,
        markup=False,
        log_time_format=TIME_FORMAT,
    )
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler(cfg: LoggingConfig) -> DailyFileHandler:
    handler = DailyFileHandler(cfg.log_dir)  # type: ignore[arg-type]
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=TIME_FORMAT))
    return handler


class _LoggingState:
    """Handlers installed on the root logger by ``init_logging``."""

    def __init__(self) -> None:
        self.lock = RLock()
        self.config: LoggingConfig | None = None
        self.listener: QueueListener | None = None
        self.outputs: list[logging.Handler] = []
        self.attached: list[logging.Handler] = []

    def install(self, cfg: LoggingConfig) -> None:
        outputs: list[logging.Handler] = []
        if cfg.console:
            outputs.append(_console_handler(cfg))
        if cfg.log_dir:
            outputs.append(_file_handler(cfg))
        for handler in outputs:
            handler.setLevel(cfg.numeric_level)
            handler.addFilter(_context_filter)

        attached = outputs
        if cfg.queue and outputs:
            queue_handler = QueueHandler(SimpleQueue())
            queue_handler.setLevel(cfg.numeric_level)
            # Context is captured on the emitting thread, before the hand-off.
            queue_handler.addFilter(_context_filter)
            self.listener = QueueListener(
                queue_handler.queue, *outputs, respect_handler_level=True
            )
            self.listener.start()
            attached = [queue_handler]

        root = logging.getLogger()
        root.setLevel(logging.NOTSET)
        for handler in attached:
            root.addHandler(handler)
        self.outputs = outputs
        self.attached = attached
        self.config = cfg

    def teardown(self) -> None:
        if self.listener is not None:
            self.listener.stop()
            self.listener = None
        root = logging.getLogger()
        for handler in self.attached:
            root.removeHandler(handler)
        for handler in self.outputs:
            handler.close()
        self.outputs = []
        self.attached = []
        self.config = None


_state = _LoggingState()


def init_logging(config: LoggingConfig | None = None, **overrides: Any) -> LoggingConfig:
    """Install the finstore handlers on the root logger.

    Calling again with an equal configuration is a no-op; a different one
    replaces the handlers installed by the previous call.
    """

    cfg = replace(config or LoggingConfig(), **overrides)
    with _state.lock:
        if _state.config == cfg:
            return cfg
        _state.teardown()
        _state.install(cfg)
    return cfg


def configure_from_settings(
    settings: "Settings | None" = None, **overrides: Any
) -> LoggingConfig:
    """Initialise logging from ``LOG_LEVEL``/``LOG_DIR`` in the settings."""

    if settings is None:
        from finstore.core.config import get_settings

        settings = get_settings()
    return init_logging(LoggingConfig.from_settings(settings, **overrides))


def shutdown_logging() -> None:
    """Stop the queue listener and remove the finstore handlers."""

    with _state.lock:
        _state.teardown()


def get_logger(name: str | None = None) -> logging.Logger:
    with _state.lock:
        if _state.config is None:
            init_logging()
        app_name = _state.config.app_name if _state.config else LoggingConfig.app_name
    return logging.getLogger(name or app_name)


def set_level(level: str | int) -> None:
    numeric = LoggingConfig(level=level).numeric_level
    with _state.lock:
        for handler in (*_state.attached, *_state.outputs):
            handler.setLevel(numeric)
