from __future__ import annotations

import logging

import pytest

from finstore.core.config import DatabaseSettings, Settings
from finstore.core.log import (
    DailyFileHandler,
    LoggingConfig,
    configure_from_settings,
    init_logging,
    shutdown_logging,
    timeit,
)
from finstore.core.log.context import ContextFilter, log_context


@pytest.fixture(autouse=True)
def _reset_context():
    log_context.clear()
    yield
    log_context.clear()


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)


def test_context_filter_prefixes_bound_values() -> None:
    log_context.bind(job="sync", connection=7, skipped=None)
    record = _record()

    ContextFilter().filter(record)

    assert record.context == "job=sync connection=7 "


def test_context_filter_keeps_existing_context() -> None:
    record = _record()
    record.context = "job=queued "
    log_context.bind(job="listener")

    ContextFilter().filter(record)

    assert record.context == "job=queued "


def test_bound_values_are_scoped() -> None:
    log_context.bind(job="sync")

    with log_context.bound(actor_id=3):
        assert log_context.get("actor_id") == 3
        assert log_context.as_dict() == {"job": "sync", "actor_id": 3}

    assert log_context.get("actor_id") is None
    log_context.unbind("job")
    record = _record()
    ContextFilter().filter(record)
    assert record.context == ""


def test_timeit_logs_throughput(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("finstore.tests.timer")

    with caplog.at_level(logging.INFO, logger="finstore.tests.timer"):
        with timeit("Balance upsert", logger=logger, total=10):
            pass
        with timeit("Price upsert", logger=logger, unit="prices") as timer:
            timer.add(3)

    assert "Balance upsert took" in caplog.text
    assert "for 10 rows" in caplog.text
    assert "for 3 prices" in caplog.text


def test_timeit_logs_failure(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("finstore.tests.timer")

    with caplog.at_level(logging.INFO, logger="finstore.tests.timer"):
        with pytest.raises(RuntimeError):
            with timeit("Price upsert", logger=logger, unit="prices"):
                raise RuntimeError("boom")

    assert "Price upsert failed after" in caplog.text


def test_daily_file_handler_writes_to_dated_file(tmp_path) -> None:
    handler = DailyFileHandler(tmp_path / "logs")
    handler.setFormatter(logging.Formatter("%(message)s"))
    try:
        handler.emit(_record("written"))
    finally:
        handler.close()

    (log_file,) = (tmp_path / "logs").glob("*.log")
    assert log_file.read_text(encoding="utf-8").strip() == "written"


def test_level_names_resolve() -> None:
    assert LoggingConfig(level="debug").numeric_level == logging.DEBUG
    assert LoggingConfig(level=logging.WARNING).numeric_level == logging.WARNING
    assert LoggingConfig(level="chatty").numeric_level == logging.INFO


def test_config_from_settings() -> None:
    settings = Settings(
        database=DatabaseSettings("sqlite", "", 0, "", "", ":memory:"),
        log_level="WARNING",
        log_dir="var/log",
    )

    cfg = LoggingConfig.from_settings(settings, app_name="init-db")

    assert (cfg.app_name, cfg.level, cfg.log_dir) == ("init-db", "WARNING", "var/log")


def test_init_logging_with_file_output(tmp_path) -> None:
    shutdown_logging()
    try:
        init_logging(level="DEBUG", log_dir=tmp_path, console=False, queue=False)
        log_context.bind(job="test")
        logging.getLogger("finstore.tests").info("to file")
    finally:
        shutdown_logging()

    (log_file,) = tmp_path.glob("*.log")
    content = log_file.read_text(encoding="utf-8")
    assert "job=test to file" in content


def test_configure_from_settings_uses_queue(tmp_path) -> None:
    settings = Settings(
        database=DatabaseSettings("sqlite", "", 0, "", "", ":memory:"),
        log_level="INFO",
        log_dir=str(tmp_path),
    )
    shutdown_logging()
    try:
        cfg = configure_from_settings(settings, console=False)
        with log_context.bound(job="queued"):
            logging.getLogger("finstore.tests").info("through the queue")
        logging.getLogger("finstore.tests").debug("below the level")
    finally:
        # Stopping the listener drains the queue.
        shutdown_logging()

    assert cfg.queue is True
    (log_file,) = tmp_path.glob("*.log")
    content = log_file.read_text(encoding="utf-8")
    assert "job=queued through the queue" in content
    assert "below the level" not in content
