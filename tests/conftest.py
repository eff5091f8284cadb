"""Shared pytest fixtures for PomoKeeper tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from pomokeeper.database import KeyValueStore, SessionHistory, MemoryStore
from pomokeeper.database.db import configure_engine, init_db
from pomokeeper.settings import Settings
from pomokeeper.timer import FakeClock, TimerEngine

from helpers import ListSink


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def clock():
    return FakeClock(monotonic_ms=1_000_000.0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def sink():
    return ListSink()


@pytest.fixture
def engine(qapp, store, sink, clock, settings):
    """Fresh TimerEngine on a fake clock, in-memory store and list sink."""
    return TimerEngine(store, sink, clock=clock, settings=settings)


@pytest.fixture
def engine_db(qapp, clock, settings):
    """TimerEngine wired to the SQLite-backed store and history."""
    return TimerEngine(KeyValueStore(), SessionHistory(), clock=clock, settings=settings)
