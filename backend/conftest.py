import mongomock
import pytest

from app import create_app
from app.config import TestConfig
from app.extensions import get_db


@pytest.fixture
def app():
    return create_app(TestConfig, mongo_client=mongomock.MongoClient())


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return get_db()


def register(client, email, password="correct-horse", name=None):
    resp = client.post("/api/v1/auth/register", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(client):
    return register(client, "ana@example.com", name="Ana")


@pytest.fixture
def auth_headers(user):
    return bearer(user["access_token"])


@pytest.fixture
def other_headers(client):
    return bearer(register(client, "bo@example.com")["access_token"])
