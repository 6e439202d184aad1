"""Key/value context attached to log records and read by the audit hook."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Mapping

_context_var: contextvars.ContextVar[Mapping[str, object]] = contextvars.ContextVar(
    "finstore_log_context", default={}
)


def _without_nulls(values: Mapping[str, object]) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


class LogContext:
    """Values bound here prefix log records as ``key=value``.

    ``actor_id`` doubles as the acting user recorded on audit events.
    """

    def bind(self, **values: object) -> None:
        _context_var.set({**_context_var.get(), **_without_nulls(values)})

    def unbind(self, *keys: str) -> None:
        _context_var.set({k: v for k, v in _context_var.get().items() if k not in keys})

    def clear(self) -> None:
        _context_var.set({})

    def get(self, key: str, default: object = None) -> object:
        return _context_var.get().get(key, default)

    def as_dict(self) -> Dict[str, object]:
        return dict(_context_var.get())

    @contextmanager
    def bound(self, **values: object) -> Iterator[None]:
        """Bind ``values`` for the duration of the ``with`` block only."""

        token = _context_var.set({**_context_var.get(), **_without_nulls(values)})
        try:
            yield
        finally:
            _context_var.reset(token)


class ContextFilter(logging.Filter):
    """Set ``record.context`` from the values bound on the emitting thread.

    A record that already carries a context keeps it, so queued records are
    not re-stamped by the listener thread.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            bound = _context_var.get()
            record.context = "".join(f"{key}={value} " for key, value in bound.items())
        return True


log_context = LogContext()
