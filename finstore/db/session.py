"""Session factories and the schema bootstrap for finstore."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from finstore.core.logger import get_logger
from finstore.models import Base

from .engine import create_sync_engine

LOGGER = get_logger(__name__)


def get_sessionmaker(url: str | None = None, **kwargs) -> sessionmaker:
    """Return a ``sessionmaker`` bound to a new engine."""

    engine = create_sync_engine(url, **kwargs)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create every table of the model on ``engine``."""

    LOGGER.info("Creating schema", extra={"tables": len(Base.metadata.tables)})
    Base.metadata.create_all(engine)


@contextmanager
def session_scope(url: str | None = None, **kwargs) -> Iterator[Session]:
    """Yield a session that commits on exit and rolls back on any error."""

    factory = get_sessionmaker(url, **kwargs)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        LOGGER.warning("Rolling back session after error")
        session.rollback()
        raise
    finally:
        session.close()
