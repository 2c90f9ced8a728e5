from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from pos.domain.errors import FieldError, ValidationError

LINE_TOTAL_EPSILON = 0.01
MAX_CLIENT_NAME_LENGTH = 50
MAX_PRODUCT_NAME_LENGTH = 100
MAX_BARCODE_LENGTH = 50


@dataclass(frozen=True)
class OrderItemForm:
    barcode: str
    quantity: int
    unit_price: float
    expected_total: Optional[float] = None


def to_int(value: object) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not a quantity")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("not an integer")
        return int(value)
    return int(value)  # type: ignore[arg-type]


def to_money(value: object) -> float:
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    amount = float(value)  # type: ignore[arg-type]
    if not math.isfinite(amount):
        raise ValueError("amount must be finite")
    return amount


def _get(item: object, key: str) -> object:
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def validate_order_items(items: Iterable[object]) -> tuple[list[OrderItemForm], list[FieldError]]:
    """Normalize raw order items and collect every field error.

    Items may be dicts with ``barcode``, ``quantity``, ``unit_price`` and an
    optional ``expected_total``, or objects exposing the same attributes.
    Nothing is returned in the form list for an item that has errors.
    """
    forms: list[OrderItemForm] = []
    errors: list[FieldError] = []

    for idx, it in enumerate(items):
        item_errors: list[FieldError] = []

        barcode = _get(it, "barcode")
        barcode = str(barcode).strip() if barcode is not None else ""
        if not barcode:
            item_errors.append(FieldError("barcode", "Barcode is required.", idx))

        qty = 0
        try:
            qty = to_int(_get(it, "quantity"))
            if qty <= 0:
                item_errors.append(FieldError("quantity", "Quantity must be > 0.", idx))
        except (TypeError, ValueError):
            item_errors.append(FieldError("quantity", "Quantity must be a whole number.", idx))

        price = 0.0
        try:
            price = to_money(_get(it, "unit_price"))
            if price <= 0:
                item_errors.append(FieldError("unit_price", "Unit price must be > 0.", idx))
        except (TypeError, ValueError):
            item_errors.append(FieldError("unit_price", "Unit price must be a number.", idx))

        expected_total = None
        raw_total = _get(it, "expected_total")
        if raw_total is not None:
            try:
                expected_total = to_money(raw_total)
            except (TypeError, ValueError):
                item_errors.append(FieldError("expected_total", "Expected total must be a number.", idx))

        if item_errors:
            errors.extend(item_errors)
            continue
        forms.append(OrderItemForm(barcode=barcode, quantity=qty, unit_price=price, expected_total=expected_total))

    return forms, errors


def line_total_matches(form: OrderItemForm, epsilon: float = LINE_TOTAL_EPSILON) -> bool:
    if form.expected_total is None:
        return True
    # small slack for binary float representation of cents
    return abs(form.unit_price * form.quantity - form.expected_total) <= epsilon + 1e-9


def normalize_client_name(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def validate_client_name(name: str) -> list[FieldError]:
    if not name:
        return [FieldError("name", "Client name is required.")]
    if len(name) > MAX_CLIENT_NAME_LENGTH:
        return [FieldError("name", f"Client name must be at most {MAX_CLIENT_NAME_LENGTH} characters.")]
    return []


def validate_product_fields(barcode: str, name: str, mrp: object, image_url: Optional[str] = None) -> list[FieldError]:
    errors: list[FieldError] = []
    if not barcode:
        errors.append(FieldError("barcode", "Barcode is required."))
    elif len(barcode) > MAX_BARCODE_LENGTH:
        errors.append(FieldError("barcode", f"Barcode must be at most {MAX_BARCODE_LENGTH} characters."))
    if not name:
        errors.append(FieldError("name", "Product name is required."))
    elif len(name) > MAX_PRODUCT_NAME_LENGTH:
        errors.append(FieldError("name", f"Product name must be at most {MAX_PRODUCT_NAME_LENGTH} characters."))
    try:
        if to_money(mrp) <= 0:
            errors.append(FieldError("mrp", "MRP must be > 0."))
    except (TypeError, ValueError):
        errors.append(FieldError("mrp", "MRP must be a number."))
    if image_url is not None and image_url.strip() and not image_url.strip().startswith(("http://", "https://")):
        errors.append(FieldError("image_url", "Image URL must start with http:// or https://."))
    return errors


def raise_if_errors(errors: list[FieldError]) -> None:
    if errors:
        raise ValidationError(errors=errors)
