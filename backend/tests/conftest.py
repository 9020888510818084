"""Pytest fixtures: a fresh in-memory database and app per test.

Each test gets its own application (and therefore its own SQLite engine), so
data written through committing units of work never leaks between cases.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient

from tests.factories import SQLAlchemySession
from tubehub.core.config import TestingConfig
from tubehub.core.extensions import db as _db
from tubehub.factory import create_app


class HTTPSClient(FlaskClient):
    """Test client issuing requests over ``https`` so ``Secure`` cookies round-trip."""

    def open(self, *args: Any, **kwargs: Any):
        kwargs.setdefault("base_url", "https://localhost")
        return super().open(*args, **kwargs)


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    The application context stays pushed for the whole test so services,
    repositories and factories share the Flask-scoped session.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig, instance_relative_config=False)
    application.test_client_class = HTTPSClient
    with application.app_context():
        yield application


@pytest.fixture()
def db(app: Flask) -> Generator[Any, None, None]:
    """Create all tables for this test and drop them afterwards."""
    _db.create_all()
    try:
        yield _db
    finally:
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db: Any) -> Any:
    """Return the Flask-scoped session used by application code."""
    return db.session


@pytest.fixture()
def client(app: Flask, db: Any) -> FlaskClient:
    """Return an HTTPS test client with a ready database."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[..., Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01") as frozen:
    ...         frozen.tick(60)
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None, **kwargs: Any) -> Any:
        return _freeze_time(target or "2024-01-01 12:00:00", **kwargs)

    return _factory


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Wire Factory Boy's session helper when the test uses the database."""
    if "db" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
