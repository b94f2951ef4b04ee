"""
Shared pytest fixtures for the Miles Ahead test suite.

All tests run against an in-memory SQLite database (TestingConfig).
A single app context is pushed for the whole session so that SQLAlchemy
objects remain attached throughout.  After each test, clean_db wipes all
rows so tests are fully independent.

The gas price scraper is replaced by a FakeFetcher for every test so no test
ever touches the network.
"""
from datetime import date
from types import SimpleNamespace

import pytest
from flask import g

from app import create_app
from extensions import db as _db


class FakeFetcher:
    """Stands in for fetch_station_price and records every call."""

    def __init__(self, price=None):
        self.price = price
        self.calls = []

    def __call__(self, station_id):
        self.calls.append(station_id)
        return self.price


# ---------------------------------------------------------------------------
# Application / database lifecycle
# ---------------------------------------------------------------------------

@pytest.fixture(scope='session')
def app():
    """Create a test Flask application with an in-memory SQLite database."""
    application = create_app('testing')
    ctx = application.app_context()
    ctx.push()
    _db.create_all()
    yield application
    _db.session.remove()
    _db.drop_all()
    ctx.pop()


@pytest.fixture(autouse=True)
def clean_db(app):
    """Wipe every table after each test so tests never share state."""
    yield
    _db.session.rollback()
    for table in reversed(_db.metadata.sorted_tables):
        _db.session.execute(table.delete())
    _db.session.commit()
    _db.session.expunge_all()


@pytest.fixture(autouse=True)
def fetcher(app, monkeypatch):
    """Fake price fetcher registered on the app; returns None unless set."""
    fake = FakeFetcher()
    monkeypatch.setitem(app.extensions, 'gas_price_fetcher', fake)
    return fake


@pytest.fixture
def store(app):
    from services.mileage_store import get_store
    return get_store()


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------

@pytest.fixture
def client(app):
    # The session app context is shared by every request, so Flask-Login's
    # cached user on ``g`` has to be cleared between tests.
    g.pop('_login_user', None)
    with app.test_client() as test_client:
        yield test_client
    g.pop('_login_user', None)


@pytest.fixture
def auth_client(client):
    """Client that has already passed the dashboard password gate."""
    response = client.post('/login', data={'password': 'test-password'})
    assert response.status_code == 302
    return client


@pytest.fixture(scope='session')
def unconfigured_app():
    """App started without a database URI, so the inert store is active."""
    return create_app('testing_unconfigured')


# ---------------------------------------------------------------------------
# Plain data helpers
# ---------------------------------------------------------------------------

def reading(day, miles):
    return SimpleNamespace(reading_date=day, reading_miles=miles)


def trip(name, start, end, miles, trip_id=None):
    return SimpleNamespace(id=trip_id, name=name, start_date=start, end_date=end, est_miles=miles)


def price_sample(recorded_at, price):
    return SimpleNamespace(recorded_at=recorded_at, price=price)


def lease(**overrides):
    terms = dict(
        vehicle_id='truck',
        name='',
        mpg=30.0,
        lease_start=date(2024, 5, 12),
        lease_end=date(2027, 11, 12),
        annual_allowance=12000.0,
        overage_rate=0.11,
    )
    terms.update(overrides)
    return terms
