import pytest
from fastapi.testclient import TestClient

from app.database import CatalogStore
from app.main import create_app


@pytest.fixture
def store() -> CatalogStore:
    return CatalogStore()


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def htmx() -> dict:
    return {"HX-Request": "true"}
