"""Shared fixtures: isolated SQLite store, controllable clock, app client."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from helpers import FakeClock, build_service, make_settings
from staff_auth.db.session import Database
from staff_auth.main import create_app


@pytest.fixture
def clock():
    return FakeClock(datetime.now(timezone.utc))


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.connect()
    yield db
    db.close()


@pytest.fixture
def service(database, settings, clock):
    with database.session() as db:
        yield build_service(db, settings, clock)


@pytest.fixture
def client(settings, database, clock):
    app = create_app(settings, database=database, clock=clock)
    with TestClient(app) as test_client:
        yield test_client
