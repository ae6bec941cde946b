import pytest
from fastapi.testclient import TestClient

from main import create_app


def register(client, username="alice", password="password123"):
    return client.post("/register", json={"username": username, "password": password})


def login(client, username="alice", password="password123"):
    return client.post("/customer/login", json={"username": username, "password": password})


@pytest.fixture
def app():
    """A fresh application, with freshly seeded stores, per test."""
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def alice(client):
    """A client holding a logged-in session for "alice"."""
    assert register(client).status_code == 201
    assert login(client).status_code == 200
    return client
