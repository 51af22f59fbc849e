"""Reusable field types and validation-error formatting."""

from decimal import Decimal
from typing import Annotated, Any, Iterable

from pydantic import PlainSerializer, StringConstraints

# Largest value an INTEGER column holds on every supported backend
MAX_INT = 2**31 - 1

# Money columns are DECIMAL(10,2)
MONEY_DIGITS = 10
CENTS = Decimal("0.01")

# Stored amounts go out as JSON numbers with two decimal places
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: float(value.quantize(CENTS)), return_type=float, when_used="json"),
]

# SKU: alphanumeric with hyphens (e.g. PROD-12345), 3-50 characters
SKU_PATTERN = r"^[A-Za-z0-9\-]+$"
SKUType = Annotated[str, StringConstraints(strip_whitespace=True, pattern=SKU_PATTERN, min_length=3, max_length=50)]

# Phone: digits, spaces and + - ( ), 10-20 characters
PHONE_PATTERN = r"^[\d\s\-\+\(\)]+$"
PhoneType = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN, min_length=10, max_length=20)]

_PATTERN_MESSAGES = {
    "sku": "SKU must be alphanumeric with hyphens, 3-50 characters",
    "phone": "Invalid phone number format",
}


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts).lower() if parts else "body"


def _error_message(field: str, error: dict) -> str:
    err_type = error.get("type", "")
    ctx = error.get("ctx") or {}
    leaf = field.rsplit(".", 1)[-1]

    if err_type == "missing":
        return "This field is required"
    if err_type == "value_error" and "email" in error.get("msg", ""):
        return "Invalid email format"
    if err_type == "string_pattern_mismatch":
        return _PATTERN_MESSAGES.get(leaf, "Invalid value")
    if leaf in _PATTERN_MESSAGES and err_type in ("string_too_short", "string_too_long"):
        return _PATTERN_MESSAGES[leaf]
    if err_type in ("string_too_short", "too_short"):
        return "Value is too short"
    if err_type in ("string_too_long", "too_long"):
        return "Value is too long"
    if err_type == "greater_than":
        return f"Value must be greater than {ctx.get('gt')}"
    if err_type == "greater_than_equal":
        return f"Value must be greater than or equal to {ctx.get('ge')}"
    if err_type == "less_than_equal":
        return f"Value must be less than or equal to {ctx.get('le')}"
    if err_type == "decimal_max_digits":
        return f"Value must have at most {ctx.get('max_digits')} digits"
    if err_type == "decimal_whole_digits":
        return f"Value must have at most {ctx.get('whole_digits')} digits before the decimal point"
    if err_type == "decimal_max_places":
        return f"Value must have at most {ctx.get('decimal_places')} decimal places"
    if err_type == "literal_error":
        return f"Value must be one of: {ctx.get('expected')}"
    if err_type == "json_invalid":
        return "Malformed JSON body"
    return "Invalid value"


def format_validation_errors(errors: Iterable[dict]) -> list[dict]:
    """Turn pydantic/FastAPI error dicts into `[{field, message}]`."""
    formatted = []
    for error in errors:
        field = _field_name(error.get("loc", ()))
        formatted.append({"field": field, "message": _error_message(field, error)})
    return formatted


def blank_to_none(value: Any) -> Any:
    """Treat empty strings in partial updates as "not supplied"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
