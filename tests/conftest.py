"""Shared pytest fixtures for opensurvey tests."""

import pytest

from opensurvey.db.session import create_db_engine, create_session_factory, init_db


@pytest.fixture
def engine():
    """In-memory response store built the way the app builds it."""
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def session(session_factory):
    """Open a session on the test store; rolled back and closed afterwards."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()
