import pytest

from repositories.product_repo import ProductRepository


def test_create_product_returns_envelope(client):
    r = client.post(
        "/api/products",
        json={"name": "Wireless Mouse", "sku": "MOUSE-001", "price": 29.5, "quantity": 15, "category": "Electronics"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["responseCode"] == "01"
    assert body["responseDesc"] == "Product created successfully"
    product = body["responseData"]
    assert product["sku"] == "MOUSE-001"
    assert product["price"] == 29.5
    assert product["quantity"] == 15
    assert r.headers["Location"].endswith(f"/api/products/{product['id']}")


def test_create_product_validation_errors(client):
    r = client.post("/api/products", json={"sku": "bad sku!", "price": 0, "quantity": -1})
    assert r.status_code == 400
    body = r.json()
    assert body["responseCode"] == "14"
    errors = {e["field"]: e["message"] for e in body["responseData"]}
    assert errors["name"] == "This field is required"
    assert errors["sku"] == "SKU must be alphanumeric with hyphens, 3-50 characters"
    assert errors["price"] == "Value must be greater than 0"
    assert errors["quantity"] == "Value must be greater than or equal to 0"


def test_create_product_duplicate_sku(client, make_product):
    make_product(sku="DUP-1")
    r = client.post("/api/products", json={"name": "Other", "sku": "DUP-1", "price": 5, "quantity": 1})
    assert r.status_code == 400
    assert r.json()["responseCode"] == "15"
    assert r.json()["responseDesc"] == "Duplicated SKU"


def test_get_product_and_not_found(client, make_product):
    product = make_product()
    r = client.get(f"/api/products/{product['id']}")
    assert r.status_code == 200
    assert r.json()["responseData"]["name"] == product["name"]

    r = client.get("/api/products/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"responseCode": "13", "responseDesc": "Product not found"}


def test_list_products_paginates(client, make_product):
    for _ in range(3):
        make_product()

    r = client.get("/api/products", params={"page": 1, "page_size": 2})
    assert r.status_code == 200
    data = r.json()["responseData"]
    assert len(data["products"]) == 2
    assert data["pagination"] == {"page": 1, "page_size": 2, "total": 3, "pages": 2}

    r = client.get("/api/products", params={"page": 2, "page_size": 2})
    assert len(r.json()["responseData"]["products"]) == 1


def test_list_products_empty_has_one_page(client):
    r = client.get("/api/products")
    data = r.json()["responseData"]
    assert data["products"] == []
    assert data["pagination"] == {"page": 1, "page_size": 10, "total": 0, "pages": 1}


def test_list_products_rejects_oversized_page(client):
    r = client.get("/api/products", params={"page_size": 101})
    assert r.status_code == 400
    assert r.json()["responseCode"] == "14"


def test_list_products_search_and_category(client, make_product):
    make_product(name="Wireless Mouse", category="Electronics")
    make_product(name="Desk Lamp", description="Warm light", category="Home")
    make_product(name="Gaming Mouse", category="Gaming")

    r = client.get("/api/products", params={"search": "mouse"})
    names = sorted(p["name"] for p in r.json()["responseData"]["products"])
    assert names == ["Gaming Mouse", "Wireless Mouse"]

    r = client.get("/api/products", params={"search": "warm"})
    assert [p["name"] for p in r.json()["responseData"]["products"]] == ["Desk Lamp"]

    r = client.get("/api/products", params={"search": "mouse", "category": "Gaming"})
    assert [p["name"] for p in r.json()["responseData"]["products"]] == ["Gaming Mouse"]


def test_list_all_products_unpaginated(client, make_product):
    for _ in range(12):
        make_product()
    r = client.get("/api/products/list")
    assert r.status_code == 200
    assert len(r.json()["responseData"]) == 12


def test_update_product_reports_changed_fields(client, make_product):
    product = make_product(price=10, quantity=5)
    r = client.put(f"/api/products/{product['id']}", json={"price": 15.5, "quantity": 5, "name": ""})
    assert r.status_code == 200
    body = r.json()
    assert body["responseDesc"] == "Product updated successfully"
    assert body["responseData"]["updated_fields"] == ["price"]
    assert body["responseData"]["product"]["price"] == 15.5
    assert body["responseData"]["product"]["name"] == product["name"]


def test_update_product_without_changes(client, make_product):
    product = make_product()
    r = client.put(f"/api/products/{product['id']}", json={"name": product["name"]})
    assert r.status_code == 200
    assert r.json()["responseDesc"] == "No changes detected"
    assert r.json()["responseData"]["id"] == product["id"]


def test_update_product_keeps_quantity_when_omitted(client, make_product):
    product = make_product(quantity=7)
    client.put(f"/api/products/{product['id']}", json={"category": "Clearance"})
    r = client.get(f"/api/products/{product['id']}")
    assert r.json()["responseData"]["quantity"] == 7
    assert r.json()["responseData"]["category"] == "Clearance"


def test_update_product_duplicate_sku(client, make_product):
    make_product(sku="TAKEN-1")
    product = make_product()
    r = client.put(f"/api/products/{product['id']}", json={"sku": "TAKEN-1"})
    assert r.status_code == 400
    assert r.json()["responseCode"] == "15"


def test_update_missing_product(client):
    r = client.put("/api/products/nope", json={"name": "Anything"})
    assert r.status_code == 404


def test_delete_product(client, make_product):
    product = make_product()
    r = client.delete(f"/api/products/{product['id']}")
    assert r.status_code == 200
    assert r.json() == {"responseCode": "00", "responseDesc": "Product deleted successfully"}
    assert client.get(f"/api/products/{product['id']}").status_code == 404
    assert client.delete(f"/api/products/{product['id']}").status_code == 404


def test_delete_product_with_orders_is_rejected(client, make_product, make_customer):
    product = make_product()
    customer = make_customer()
    r = client.post(
        "/api/orders",
        json={"customer_id": customer["id"], "items": [{"product_id": product["id"], "quantity": 1}]},
    )
    assert r.status_code == 201

    r = client.delete(f"/api/products/{product['id']}")
    assert r.status_code == 400
    assert r.json()["responseCode"] == "10"
    assert client.get(f"/api/products/{product['id']}").status_code == 200


def test_money_is_returned_as_two_decimal_number(client, make_product):
    product = make_product(price=19.9)
    assert product["price"] == 19.9
    assert isinstance(product["price"], float)

    r = client.get(f"/api/products/{product['id']}")
    assert r.json()["responseData"]["price"] == 19.9

    r = client.get("/api/products/list")
    assert [p["price"] for p in r.json()["responseData"]] == [19.9]


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"quantity": 2**31}, "quantity"),
        ({"quantity": 2**63}, "quantity"),
        ({"price": 1234567890.5}, "price"),
        ({"price": 1.005}, "price"),
    ],
)
def test_create_product_rejects_values_too_large_for_columns(client, overrides, field):
    payload = {"name": "Overflow", "sku": "BIG-1", "price": 10, "quantity": 1}
    payload.update(overrides)
    r = client.post("/api/products", json=payload)
    assert r.status_code == 400
    assert r.json()["responseCode"] == "14"
    assert [e["field"] for e in r.json()["responseData"]] == [field]


def test_update_product_rejects_oversized_quantity(client, make_product):
    product = make_product()
    r = client.put(f"/api/products/{product['id']}", json={"quantity": 2**31})
    assert r.status_code == 400
    assert r.json()["responseData"] == [
        {"field": "quantity", "message": "Value must be less than or equal to 2147483647"}
    ]


def test_update_quantity_sets_stock(db, make_product):
    product = make_product(quantity=5)
    repo = ProductRepository(db)

    assert repo.update_quantity(product["id"], 9) is True
    assert repo.get_by_id(product["id"]).quantity == 9
    assert repo.update_quantity("missing", 3) is False
