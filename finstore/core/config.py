"""Environment-driven settings for the finstore data-access layer.

Values come from the process environment, with a ``.env`` file at the project
root loaded first. ``DATABASE_URL`` wins over the individual ``DB_*`` parts.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parents[2] / ".env")

_FALSE_VALUES = frozenset({"0", "false", "False", "no"})


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw not in _FALSE_VALUES


def _env_optional(name: str) -> str | None:
    return os.getenv(name) or None


@dataclass(slots=True)
class DatabaseSettings:
    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str
    url_override: str | None = None

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        return cls(
            driver=_env("DB_DRIVER", "postgresql+psycopg2"),
            host=_env("DB_HOST", "127.0.0.1"),
            port=int(_env("DB_PORT", "5432")),
            user=_env("DB_USER", "finstore"),
            password=_env("DB_PASSWORD", "finstore"),
            name=_env("DB_NAME", "finstore"),
            url_override=_env_optional("DATABASE_URL"),
        )

    @property
    def sqlalchemy_url(self) -> str:
        """SQLAlchemy URL for the configured database.

        File-based SQLite drivers use ``name`` as the database path.
        """

        if self.url_override:
            return self.url_override
        if self.driver.startswith("sqlite"):
            return f"{self.driver}:///{self.name}"
        credentials = f"{self.user}:{self.password}" if self.password else self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(slots=True)
class Settings:
    database: DatabaseSettings
    sqlalchemy_echo: bool = False
    log_level: str = "INFO"
    log_dir: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Read every setting from the environment."""

        return cls(
            database=DatabaseSettings.from_env(),
            sqlalchemy_echo=_env_flag("SQLALCHEMY_ECHO"),
            log_level=_env("LOG_LEVEL", "INFO"),
            log_dir=_env_optional("LOG_DIR"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide ``Settings``, read once."""

    settings = Settings.from_env()

    # Deferred: the logging package reads these settings too.
    from .logger import get_logger

    get_logger(__name__).debug(
        "Settings loaded",
        extra={
            "driver": settings.database.driver,
            "host": settings.database.host,
            "database": settings.database.name,
            "url_override": bool(settings.database.url_override),
            "sqlalchemy_echo": settings.sqlalchemy_echo,
        },
    )
    return settings
