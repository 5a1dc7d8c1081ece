"""Pytest fixtures configuring an isolated app, database and revocation store.

Each test gets its own application bound to a fresh in-memory SQLite database
and a private ``fakeredis`` server, so neither rows nor revoked keys leak
between cases.
"""

from __future__ import annotations

import os

import fakeredis
import pytest
from shopdesk.core.config import TestingConfig
from shopdesk.core.container import get_container
from shopdesk.core.extensions import db as _db  # Flask-SQLAlchemy instance
from shopdesk.factory import create_app  # application factory under test


@pytest.fixture()
def redis_server():
    """Private fakeredis server; set ``connected = False`` to simulate an outage."""
    return fakeredis.FakeServer()


@pytest.fixture()
def redis_client(redis_server):
    return fakeredis.FakeRedis(server=redis_server)


@pytest.fixture()
def app(tmp_path, redis_client):
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with tables created, an app context pushed and uploads
        redirected to a temporary directory.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)

    class TestConfig(TestingConfig):
        UPLOAD_DIR = str(tmp_path / "uploads")
        CORS_ORIGINS = "*"

    app = create_app(TestConfig, redis_client=redis_client)
    app.logger.setLevel("WARNING")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(app):
    """Return the Flask-scoped SQLAlchemy session used by the services."""
    return _db.session


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def container(app):
    """Wired services of the test app."""
    return get_container(app)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the app session -----------------------------------
@pytest.fixture()
def factories(session):
    """Wire Factory Boy's session helper to the app session."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)
