"""Engine + session factory."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from soundchain.core.config import get_settings
from soundchain.db.models import Base

SQLITE_PREFIX = "sqlite:///"


def _ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if url.startswith(SQLITE_PREFIX) and url != f"{SQLITE_PREFIX}:memory:":
        Path(url[len(SQLITE_PREFIX):]).parent.mkdir(parents=True, exist_ok=True)


def get_engine(url: str | None = None):
    """Engine for `url`, defaulting to DATABASE_URL as read at call time."""
    url = url or get_settings().database_url
    _ensure_sqlite_dir(url)
    return create_engine(url, echo=False)


_engine = None


def default_engine():
    """Engine for the configured DATABASE_URL, created on first use."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


def init_db(engine=None):
    """Create all tables."""
    engine = engine or default_engine()
    Base.metadata.create_all(engine)
    return engine


# Unbound until first use, so importing this module opens no database.
SessionLocal = sessionmaker()


def get_session():
    """New session, binding SessionLocal to the configured engine on first call."""
    if SessionLocal.kw.get("bind") is None:
        SessionLocal.configure(bind=default_engine())
    return SessionLocal()
