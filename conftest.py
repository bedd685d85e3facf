import pytest
from fastapi.testclient import TestClient

from api import create_app
from store import InMemoryBookStore
from utils.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture
def store():
    # Her test kendi tohumlanmış deposuyla başlar
    return InMemoryBookStore()


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    monkeypatch.delenv(OUTPUT_MODE_ENV, raising=False)
