import pytest
from fastapi.testclient import TestClient

from app.catalog.store import BookStore, get_book_store
from app.main import app


@pytest.fixture
def store():
    return BookStore.seeded()


@pytest.fixture
def client(store):
    # Each test gets its own freshly seeded catalogue
    app.dependency_overrides[get_book_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
