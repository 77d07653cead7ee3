import os
from datetime import datetime, timedelta

import jwt
import pytest
from fastapi.testclient import TestClient

SECRET = "kanban-test-secret-0123456789abcdef"

# Memory backend and a known signing key for every test
os.environ["PERSISTENCE_BACKEND"] = "memory"
os.environ["JWT_SECRET_KEY"] = SECRET
os.environ["JWT_ALGORITHM"] = "HS256"

from kanban_api.main import app  # noqa: E402
from kanban_api.repositories import get_storage, in_memory_storage  # noqa: E402


class TickingClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(self, start=datetime(2025, 1, 1, 9, 0, 0), step=timedelta(seconds=1)):
        self._now = start
        self._step = step

    def __call__(self):
        now = self._now
        self._now += self._step
        return now


def make_token(user_id=42, role="user", secret=SECRET, **claims):
    payload = {"id": user_id, "role": role, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def storage():
    fresh = in_memory_storage(TickingClock())
    app.dependency_overrides[get_storage] = lambda: fresh
    yield fresh
    app.dependency_overrides.clear()


@pytest.fixture
def client(storage):
    return TestClient(app)


@pytest.fixture
def headers():
    """Build an Authorization header for a given user id and role."""

    def _headers(user_id=42, role="user", **claims):
        return {"Authorization": f"Bearer {make_token(user_id, role, **claims)}"}

    return _headers
