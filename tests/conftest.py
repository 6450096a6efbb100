import os

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import itertools
import pytest
from fastapi.testclient import TestClient
from main import app

_counter = itertools.count(1)

@pytest.fixture(scope="session")
def client():
    # Entering the client runs the lifespan (table creation) and keeps one event loop for the session
    with TestClient(app) as c:
        yield c

@pytest.fixture
def unique():
    """Fresh suffix so tests sharing the session database never collide on usernames/emails."""
    return f"u{next(_counter)}"

def register(client: TestClient, username: str, email: str, password: str = "pass"):
    r = client.post('/api/register', json={"username": username, "email": email, "password": password})
    assert r.status_code == 200, r.json()
    return r.json()

def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}

def create_auction(client: TestClient, token: str, title: str = "Test Item", starting_price=10, duration=1):
    r = client.post('/api/auctions', json={"title": title, "description": "d", "startingPrice": starting_price, "duration": duration}, headers=auth_header(token))
    assert r.status_code == 200, r.json()
    return r.json()
