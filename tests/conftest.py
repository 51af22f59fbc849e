import pytest
from fastapi.testclient import TestClient

from db import Database, get_database
from main import app


@pytest.fixture
def db(tmp_path):
    """A fresh SQLite file database with the full schema."""
    database = Database("sqlite", sqlite_path=str(tmp_path / "erp-test.db"))
    database.create_tables()
    yield database
    database.close()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_database] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "name": f"Product {counter['n']}",
            "description": "Test product",
            "sku": f"SKU-{counter['n']:04d}",
            "price": 12.5,
            "quantity": 10,
            "category": "General",
        }
        payload.update(overrides)
        r = client.post("/api/products", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["responseData"]

    return _make


@pytest.fixture
def make_customer(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "name": f"Customer {counter['n']}",
            "email": f"customer{counter['n']}@example.com",
            "phone": "+1 555 000 1234",
            "address": "1 Main Street",
        }
        payload.update(overrides)
        r = client.post("/api/customers", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["responseData"]

    return _make


@pytest.fixture
def make_warehouse(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {"code": f"WH-{counter['n']:02d}", "name": f"Warehouse {counter['n']}", "capacity": 1000}
        payload.update(overrides)
        r = client.post("/api/warehouses", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["responseData"]

    return _make
