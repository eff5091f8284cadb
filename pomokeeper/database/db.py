"""SQLite engine and ORM session handling for PomoKeeper.

The engine is built on first use and points at ``~/.pomokeeper`` unless
``configure_engine`` has supplied another URL (tests pass
``sqlite:///:memory:``).
"""

from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base

APP_SUPPORT_DIR = Path.home() / ".pomokeeper"
DB_PATH = APP_SUPPORT_DIR / "pomokeeper.db"

_engine = None
_SessionFactory = None


def _make_engine(url: str):
    return create_engine(url, connect_args={"check_same_thread": False}, echo=False)


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = _make_engine(f"sqlite:///{DB_PATH}")
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


def configure_engine(url: str) -> None:
    """Use *url* for every session opened from now on."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = _make_engine(url)


def init_db() -> None:
    """Create the key-value and session-history tables if missing."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """One unit of work: committed if the block finishes, rolled back and
    re-raised if it fails."""
    session: OrmSession = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
