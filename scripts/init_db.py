"""Create the finstore schema on the configured database."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import inspect, text

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finstore.core.logger import (  # noqa: E402  (import after sys.path manipulation)
    configure_from_settings,
    get_logger,
    log_context,
)
from finstore.db import create_schema, create_sync_engine  # noqa: E402
from finstore.models import Base  # noqa: E402

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", type=str, default=None, help="SQLAlchemy URL overriding the environment")
    parser.add_argument("--check", action="store_true", help="Only test connectivity and list existing tables")
    parser.add_argument("--drop", action="store_true", help="Drop every finstore table before creating them")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    engine = create_sync_engine(args.url)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    existing = set(inspect(engine).get_table_names())
    logger.info("Connected via %s, %d tables present", engine.dialect.name, len(existing))

    if args.check:
        missing = sorted(set(Base.metadata.tables) - existing)
        if missing:
            logger.warning("Missing tables: %s", ", ".join(missing))
        return

    if args.drop:
        logger.warning("Dropping %d tables", len(Base.metadata.tables))
        Base.metadata.drop_all(engine)
    create_schema(engine)
    logger.info("Schema ready")


if __name__ == "__main__":
    configure_from_settings(app_name="init-db")
    log_context.bind(job="init_db")

    try:
        main()
    except Exception:
        logger.exception("Schema initialisation failed")
        sys.exit(1)
