from decimal import Decimal

import pytest

from models.product import ProductRead, ProductUpdate
from repositories.base import diff_changes
from utils.pagination import calculate_offset, calculate_total_pages
from utils.response import code_for_status, envelope, status_for_code
from utils.validators import blank_to_none, format_validation_errors


@pytest.mark.parametrize(
    "total, page_size, expected",
    [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (101, 100, 2)],
)
def test_calculate_total_pages(total, page_size, expected):
    assert calculate_total_pages(total, page_size) == expected


def test_calculate_offset():
    assert calculate_offset(1, 10) == 0
    assert calculate_offset(3, 25) == 50


def test_codes_map_to_http_status():
    assert status_for_code("00") == 200
    assert status_for_code("01") == 201
    assert status_for_code("13") == 404
    assert status_for_code("15") == 400
    assert status_for_code("99") == 500
    assert code_for_status(404) == "13"
    assert code_for_status(405) == "10"
    assert code_for_status(503) == "99"


def test_envelope_omits_missing_data():
    assert envelope("13", "Product not found") == {"responseCode": "13", "responseDesc": "Product not found"}
    assert envelope("00", "ok", {"price": Decimal("9.50")})["responseData"] == {"price": 9.5}


def test_format_validation_errors():
    errors = [
        {"type": "missing", "loc": ("body", "name"), "msg": "Field required"},
        {"type": "greater_than", "loc": ("body", "price"), "msg": "", "ctx": {"gt": 0}},
        {"type": "string_pattern_mismatch", "loc": ("body", "sku"), "msg": ""},
        {"type": "less_than_equal", "loc": ("query", "page_size"), "msg": "", "ctx": {"le": 100}},
        {"type": "json_invalid", "loc": ("body", 12), "msg": ""},
    ]
    assert format_validation_errors(errors) == [
        {"field": "name", "message": "This field is required"},
        {"field": "price", "message": "Value must be greater than 0"},
        {"field": "sku", "message": "SKU must be alphanumeric with hyphens, 3-50 characters"},
        {"field": "page_size", "message": "Value must be less than or equal to 100"},
        {"field": "12", "message": "Malformed JSON body"},
    ]


def test_blank_to_none():
    assert blank_to_none("") is None
    assert blank_to_none("   ") is None
    assert blank_to_none("Desk") == "Desk"
    assert blank_to_none(0) == 0


def test_diff_changes_ignores_unset_and_unchanged_fields():
    current = ProductRead(
        id="p1",
        name="Desk Lamp",
        description="Warm light",
        sku="LAMP-1",
        price=Decimal("19.99"),
        quantity=4,
        category="Home",
    )
    patch = ProductUpdate(name="Desk Lamp", price="24.50", description="")
    assert diff_changes(current, patch) == {"price": Decimal("24.50")}
    assert diff_changes(current, ProductUpdate()) == {}


def test_money_serializes_as_rounded_number():
    product = ProductRead(id="p1", name="Cable", sku="CAB-1", price=Decimal("2.5"), quantity=1)
    assert product.model_dump(mode="json")["price"] == 2.5
    assert product.model_dump()["price"] == Decimal("2.5")

    stored = ProductRead(id="p2", name="Cable", sku="CAB-2", price=40.0, quantity=1)
    assert envelope("00", "ok", stored)["responseData"]["price"] == 40.0
