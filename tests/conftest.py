"""
Shared fixtures.
"""

import pytest

from models.base import create_db_engine, create_session_factory, init_db


@pytest.fixture
def session_factory():
    """A sessionmaker bound to a fresh in-memory SQLite database."""
    db_engine = create_db_engine()
    init_db(bind=db_engine)
    yield create_session_factory(db_engine)
    db_engine.dispose()
