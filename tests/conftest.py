"""
- Keep the randomness source predictable and offline for every test
- Provide a fresh in-memory MatchStore per test and override FastAPI's
  get_store so routes use it
- Provide a client fixture (TestClient(app)) that already has the override applied
"""
import os
from typing import Callable, List

import pytest
from fastapi.testclient import TestClient

# Never reach out to random.org from the test suite
os.environ.setdefault("CODEGUESS_USE_RANDOM_ORG", "false")

from codeguess.main import app, get_store
from codeguess.store import MatchStore


def permutation_for(secret: List[int]) -> List[int]:
    """A shuffle of 0..9 whose first four digits are the wanted secret."""
    return list(secret) + [d for d in range(10) if d not in secret]


@pytest.fixture
def scripted_shuffle() -> Callable:
    """
    scripted_shuffle([1,2,3,4], [5,6,7,8]) returns a shuffle that deals those
    secrets in order; any other request (e.g. a random start) gets 0..n-1.
    """
    def factory(*secrets: List[int]):
        queue = [permutation_for(s) for s in secrets]

        def shuffle(n: int) -> List[int]:
            if n == 10 and queue:
                return queue.pop(0)
            return list(range(n))

        return shuffle

    return factory


@pytest.fixture
def store() -> MatchStore:
    return MatchStore()


@pytest.fixture(autouse=True)
def override_store(store):
    """Force the app to use a fresh store for every test."""
    app.dependency_overrides[get_store] = lambda: store
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)
