import itertools

import mongomock
import pytest

from tasktrack.app import create_app

from .helpers import bearer, register

_addresses = itertools.count(1)


@pytest.fixture()
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture()
def app(mongo_client):
    return create_app("tasktrack.config.TestingConfig", mongo_client=mongo_client)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db(app, mongo_client):
    return mongo_client[app.config["MONGO_DB_NAME"]]


@pytest.fixture()
def make_user(client):
    """Register a user from a fresh client address; returns (user, auth headers)."""

    def _make(name="Jane Doe", email="jane@example.com", password="pw123456"):
        resp = register(client, name, email, password, remote_addr=f"10.0.0.{next(_addresses) % 250}")
        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        return body["user"], bearer(body["token"])

    return _make


@pytest.fixture()
def auth_headers(make_user):
    _, headers = make_user()
    return headers
