import pytest

from repositories.order_repo import OrderRepository
from repositories.product_repo import ProductRepository


def _order(client, customer_id, *lines):
    items = [{"product_id": product_id, "quantity": quantity} for product_id, quantity in lines]
    return client.post("/api/orders", json={"customer_id": customer_id, "items": items})


def _stock(client, product_id):
    return client.get(f"/api/products/{product_id}").json()["responseData"]["quantity"]


def test_place_order(client, make_customer, make_product):
    customer = make_customer(name="Jane Doe")
    mouse = make_product(name="Mouse", price=12.5, quantity=10)
    cable = make_product(name="Cable", price=2.25, quantity=4)

    r = _order(client, customer["id"], (mouse["id"], 3), (cable["id"], 4))
    assert r.status_code == 201
    body = r.json()
    assert body["responseCode"] == "01"
    assert body["responseDesc"] == "Order created successfully"

    data = body["responseData"]
    assert data["order"]["customer_name"] == "Jane Doe"
    assert data["order"]["status"] == "pending"
    assert data["order"]["total_amount"] == 46.5
    assert data["summary"] == {"total_items": 2, "total_amount": 46.5}
    totals = {item["product_id"]: item["total_price"] for item in data["items"]}
    assert totals == {mouse["id"]: 37.5, cable["id"]: 9.0}

    assert _stock(client, mouse["id"]) == 7
    assert _stock(client, cable["id"]) == 0


def test_order_can_be_read_back(client, make_customer, make_product):
    customer = make_customer()
    product = make_product(name="Lamp", price=20, quantity=5)
    order_id = _order(client, customer["id"], (product["id"], 2)).json()["responseData"]["order"]["id"]

    r = client.get(f"/api/orders/{order_id}")
    assert r.status_code == 200
    data = r.json()["responseData"]
    assert data["order"]["total_amount"] == 40
    assert data["items"][0]["product_name"] == "Lamp"
    assert data["summary"]["total_items"] == 1

    r = client.get(f"/api/orders/{order_id}/items")
    assert [item["quantity"] for item in r.json()["responseData"]] == [2]

    r = client.get("/api/orders")
    assert [o["id"] for o in r.json()["responseData"]] == [order_id]


def test_missing_order(client):
    assert client.get("/api/orders/nope").status_code == 404
    assert client.get("/api/orders/nope/items").status_code == 404


def test_unknown_customer(client, make_product):
    product = make_product()
    r = _order(client, "no-such-customer", (product["id"], 1))
    assert r.status_code == 400
    assert r.json() == {
        "responseCode": "10",
        "responseDesc": "Invalid customer ID",
        "responseData": "Customer not found",
    }
    assert _stock(client, product["id"]) == 10


def test_unknown_product_writes_nothing(client, db, make_customer, make_product):
    customer = make_customer()
    product = make_product(quantity=10)

    r = _order(client, customer["id"], (product["id"], 2), ("ghost", 1))
    assert r.status_code == 400
    assert r.json()["responseDesc"] == "Invalid product ID"
    assert r.json()["responseData"] == {"product_id": "ghost", "message": "Product not found"}

    assert _stock(client, product["id"]) == 10
    assert db.table_counts()["orders"] == 0


def test_insufficient_stock(client, make_customer, make_product):
    customer = make_customer()
    product = make_product(name="Rare Item", quantity=2)

    r = _order(client, customer["id"], (product["id"], 3))
    assert r.status_code == 400
    body = r.json()
    assert body["responseDesc"] == "Insufficient stock"
    assert body["responseData"] == {
        "product_id": product["id"],
        "product_name": "Rare Item",
        "available": 2,
        "requested": 3,
    }


def test_repeated_lines_are_checked_together(client, db, make_customer, make_product):
    customer = make_customer()
    product = make_product(quantity=10)

    r = _order(client, customer["id"], (product["id"], 6), (product["id"], 6))
    assert r.status_code == 400
    assert r.json()["responseData"]["requested"] == 12
    assert _stock(client, product["id"]) == 10
    assert db.table_counts()["orders"] == 0

    r = _order(client, customer["id"], (product["id"], 6), (product["id"], 4))
    assert r.status_code == 201
    assert _stock(client, product["id"]) == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"customer_id": "c", "items": []},
        {"customer_id": "c", "items": [{"product_id": "p", "quantity": 0}]},
        {"customer_id": "c", "items": [{"product_id": "p", "quantity": 2**31}]},
        {"items": [{"product_id": "p", "quantity": 1}]},
    ],
)
def test_invalid_order_payload(client, payload):
    r = client.post("/api/orders", json=payload)
    assert r.status_code == 400
    assert r.json()["responseCode"] == "14"


def test_failure_mid_transaction_rolls_back(client, db, monkeypatch, make_customer, make_product):
    customer = make_customer()
    product = make_product(quantity=10)

    def broken_insert(self, cur, item):
        raise RuntimeError("disk full")

    monkeypatch.setattr(OrderRepository, "insert_item", broken_insert)

    r = _order(client, customer["id"], (product["id"], 2))
    assert r.status_code == 500
    assert r.json() == {
        "responseCode": "99",
        "responseDesc": "Failed to create order",
        "responseData": "Database error",
    }
    assert db.table_counts()["orders"] == 0
    assert _stock(client, product["id"]) == 10


def test_guarded_decrement_never_goes_negative(db, make_product):
    product = make_product(quantity=3)
    repo = ProductRepository(db)

    with db.transaction() as cur:
        assert repo.decrement_quantity(cur, product["id"], 2) is True
        assert repo.decrement_quantity(cur, product["id"], 2) is False

    assert repo.get_by_id(product["id"]).quantity == 1


def test_stock_race_is_reported_as_insufficient(client, db, monkeypatch, make_customer, make_product):
    customer = make_customer()
    product = make_product(quantity=5)

    # another order takes the stock after the availability check
    original = ProductRepository.decrement_quantity

    def racing_decrement(self, cur, product_id, quantity):
        cur.execute("UPDATE products SET quantity = 0 WHERE id = ?", (product_id,))
        return original(self, cur, product_id, quantity)

    monkeypatch.setattr(ProductRepository, "decrement_quantity", racing_decrement)

    r = _order(client, customer["id"], (product["id"], 2))
    assert r.status_code == 400
    assert r.json()["responseDesc"] == "Insufficient stock"
    assert db.table_counts()["orders"] == 0
    assert _stock(client, product["id"]) == 5


def test_order_amounts_are_numbers(client, make_customer, make_product):
    customer = make_customer()
    product = make_product(price=0.1, quantity=10)

    order_id = _order(client, customer["id"], (product["id"], 3)).json()["responseData"]["order"]["id"]

    data = client.get(f"/api/orders/{order_id}").json()["responseData"]
    assert data["order"]["total_amount"] == 0.3
    assert data["summary"]["total_amount"] == 0.3
    assert data["items"][0]["unit_price"] == 0.1
    assert data["items"][0]["total_price"] == 0.3
