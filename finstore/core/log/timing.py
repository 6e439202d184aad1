"""Duration and throughput logging for bulk writes."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional


@dataclass
class WriteTimer:
    label: str
    unit: str = "rows"
    rows: Optional[int] = None
    started: float = field(default_factory=perf_counter)

    def add(self, count: int = 1) -> None:
        self.rows = (self.rows or 0) + count

    @property
    def elapsed(self) -> float:
        return perf_counter() - self.started

    def summary(self) -> str:
        elapsed = self.elapsed
        text = f"{self.label} took {elapsed:.3f}s"
        if self.rows:
            text += f" for {self.rows:,} {self.unit}"
            if elapsed > 0:
                text += f" ({self.rows / elapsed:,.0f} {self.unit}/s)"
        return text


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "rows",
    total: Optional[int] = None,
) -> Iterator[WriteTimer]:
    """Log how long the ``with`` block took.

    ``total`` seeds the row count; ``WriteTimer.add`` increments it from
    inside the block. A failing block is logged at ERROR and re-raised.
    """

    log = logger or logging.getLogger("finstore.timing")
    timer = WriteTimer(label=label, unit=unit, rows=total)
    try:
        yield timer
    except Exception:
        log.error("%s failed after %.3fs", label, timer.elapsed)
        raise
    log.log(level, timer.summary())
