from config import settings
from db import Database


def test_root_lists_endpoints(client):
    r = client.get("/")
    assert r.status_code == 200
    body = r.json()
    assert body["responseDesc"] == "ERP API is running"
    assert body["responseData"]["endpoints"]["orders"]["create"] == "POST /api/orders"


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()["responseData"]
    assert data["status"] == "OK"
    assert data["database"] == "connected"
    assert r.headers["X-Request-ID"]


def test_health_reports_degraded_database(client, db, monkeypatch):
    monkeypatch.setattr(db, "ping", lambda: False)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["responseDesc"] == "System is degraded"
    assert r.json()["responseData"]["status"] == "DEGRADED"


def test_request_id_is_echoed(client):
    r = client.get("/", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"


def test_debug_db_counts(client, make_product, make_customer):
    make_product()
    make_product()
    make_customer()
    r = client.get("/debug/db")
    data = r.json()["responseData"]
    assert data["products_count"] == 2
    assert data["customers_count"] == 1
    assert data["orders_count"] == 0
    assert data["total_records"] == 3


def test_unknown_route_uses_envelope(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"responseCode": "13", "responseDesc": "Not Found"}


def test_malformed_json(client):
    r = client.post("/api/products", content="{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["responseCode"] == "14"


def test_unhandled_error_is_recovered(client, monkeypatch):
    def explode(self):
        raise RuntimeError("socket closed")

    monkeypatch.setattr(Database, "ping", explode)
    monkeypatch.setattr(settings, "APP_ENV", "development")

    r = client.get("/health")
    assert r.status_code == 500
    body = r.json()
    assert body["responseCode"] == "99"
    assert body["responseDesc"] == "Internal Server Error"
    assert body["responseData"]["error"] == "socket closed"
    assert body["responseData"]["path"] == "/health"


def test_unhandled_error_hides_details_in_production(client, monkeypatch):
    def explode(self):
        raise RuntimeError("socket closed")

    monkeypatch.setattr(Database, "ping", explode)
    monkeypatch.setattr(settings, "APP_ENV", "production")

    r = client.get("/health")
    assert r.status_code == 500
    assert r.json()["responseData"] == "An unexpected error occurred"


def test_recovered_error_carries_cors_headers(client, monkeypatch):
    def explode(self):
        raise RuntimeError("socket closed")

    monkeypatch.setattr(Database, "ping", explode)

    r = client.get("/health", headers={"Origin": "https://shop.example"})
    assert r.status_code == 500
    assert r.json()["responseCode"] == "99"
    assert r.headers.get("access-control-allow-origin") is not None
