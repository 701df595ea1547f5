import pytest
from fastapi.testclient import TestClient

from moneybox.core.config import Settings
from moneybox.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATA_FILE=tmp_path / "data" / "products.json",
        UPLOAD_DIR=tmp_path / "uploads",
        RATE_LIMIT_ENABLED=False,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def category(client):
    """A fresh, empty category."""
    r = client.post("/api/categories", json={"name": "Investing"})
    assert r.status_code == 201
    return r.json()


@pytest.fixture
def make_product(client):
    def _make(category_id: str, name: str, **extra):
        r = client.post("/api/products", json={"categoryId": category_id, "name": name, **extra})
        assert r.status_code == 201, r.text
        return r.json()

    return _make
