import itertools
import os
from datetime import datetime, timedelta, timezone

import pytest

# must be set before `tracker` is imported anywhere
os.environ["DB_PATH"] = ":memory:"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"

from sqlmodel import SQLModel  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tracker.database import engine  # noqa: E402
from tracker.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def clean_tables():
    """Start every test from empty tables."""
    yield
    with engine.begin() as conn:
        for table in reversed(SQLModel.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a user and return ready-to-use auth headers."""
    def _register(email: str = "a@test.com", password: str = "password123") -> dict:
        r = client.post("/auth/register", json={"email": email, "password": password})
        assert r.status_code == 201, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}
    return _register


@pytest.fixture
def fake_clock(monkeypatch):
    """Make every timestamp one second later than the previous one."""
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ticks = itertools.count(1)

    def _now() -> str:
        moment = start + timedelta(seconds=next(ticks))
        return moment.isoformat(timespec="microseconds").replace("+00:00", "Z")

    monkeypatch.setattr("tracker.models.utc_now_iso", _now)
    return _now
