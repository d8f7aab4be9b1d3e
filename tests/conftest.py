import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.storage import MemoryStorage, get_storage


@pytest.fixture
def memory_storage():
    return MemoryStorage(seed=False)


@pytest.fixture
def client(memory_storage):
    """Test client backed by a fresh, empty in-memory store."""
    app.state.storage = memory_storage
    app.dependency_overrides[get_storage] = lambda: memory_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
