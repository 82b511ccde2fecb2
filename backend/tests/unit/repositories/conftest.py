"""Shared fixtures for repository integration tests.

Provides an in-memory SQLite engine and a session factory.  SQLite has
no array containment, so tests here stay away from tag filters.
"""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskforce.database import Base

# Force model registration so create_all picks up every table.
import taskforce.models.directory  # noqa: F401


@pytest.fixture
def engine():
    """Function-scoped :memory: SQLite engine shared by every session."""
    eng = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def session(session_factory):
    """Function-scoped session bound to the in-memory engine."""
    sess = session_factory()
    yield sess
    sess.close()
