"""Shared fixtures: a throwaway SQLite database and fake live subscribers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import AsyncMock
from parkki.database import build_engine, build_session_factory, create_tables


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file with all tables created."""
    engine = build_engine(f"sqlite:///{tmp_path / 'parkki-test.db'}")
    create_tables(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def read_db(session_factory):
    """
    Run a read in its own short-lived session.
    An open read transaction makes a writer's commit wait, so tests never
    keep one around while the coordinator is writing.
    """
    def _run(fn):
        db = session_factory()
        try:
            return fn(db)
        finally:
            db.close()
    return _run


@pytest.fixture
def subscriber_factory():
    """Factory for fake subscriber handles with async send_text and close."""
    def _create():
        handle = AsyncMock()
        handle.send_text = AsyncMock()
        handle.close = AsyncMock()
        return handle
    return _create
