from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .payment_details import PaymentDetail


# Maximum money value: 9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical prices
MAX_PRICE_CENTS = 999_999_999

# Maximum tax rate: 100% in basis points
MAX_RATE_BPS = 10_000

# Maximum unit, carton or stock quantity; keeps running balances inside a 64-bit column
MAX_QUANTITY = 999_999_999

# Largest id a 64-bit integer primary key can hold
MAX_ID = 2**63 - 1


class ValidationError(ValueError):
    """400-level input problem (malformed payload, insufficient stock)."""


class InsufficientStockError(ValidationError):
    """A line asks for more than the variant has on hand."""

    def __init__(self, message: str, *, product_id: int, variant_id: int, requested: int, available: int):
        super().__init__(message)
        self.details = {
            "product_id": product_id,
            "variant_id": variant_id,
            "requested": requested,
            "available": available,
        }


class NotFoundError(LookupError):
    """404-level missing record (user, order, customer, supplier, variant)."""


class StorageError(RuntimeError):
    """500-level persistence failure; the message is never shown to clients."""


@dataclass(frozen=True)
class LineItemInput:
    """
    One validated order line.

    Price and tax values are copied from the request and frozen on the
    order; they are never re-read from the product catalogue.
    """
    product_id: int
    variant_id: int
    unit: int
    carton: int
    quantity: int
    mrp_cents: int
    unit_price_cents: int
    gst_rate_bps: int
    gst_amount_cents: int
    line_total_cents: int

    @property
    def key(self) -> tuple[int, int]:
        return (self.product_id, self.variant_id)


def coerce_int(value: Any, field: str) -> int:
    """
    Strict integer coercion for JSON input.

    Rejects booleans, floats, decimals and scientific notation.
    """
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    raise ValidationError(f"{field} must be an integer")


def _required_int(data: dict, field: str, *, minimum: int | None = None, maximum: int | None = None, prefix: str = "") -> int:
    label = f"{prefix}{field}"
    if field not in data or data[field] is None:
        raise ValidationError(f"{label} is required")
    value = coerce_int(data[field], label)
    if minimum is not None and value < minimum:
        raise ValidationError(f"{label} must be >= {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{label} cannot exceed {maximum}")
    return value


def required_id(data: dict, field: str) -> int:
    """Positive integer reference to another record, e.g. customer_id."""
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    return _required_int(data, field, minimum=1, maximum=MAX_ID)


def _optional_str(data: dict, field: str, max_length: int) -> str | None:
    value = data.get(field)
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    if len(value) > max_length:
        raise ValidationError(f"{field} exceeds max length {max_length}")
    return value


def _required_str(data: dict, field: str, max_length: int) -> str:
    value = _optional_str(data, field, max_length)
    if value is None:
        raise ValidationError(f"{field} is required")
    return value


def parse_line_items(payload: dict) -> list[LineItemInput]:
    """
    Validate the `products` array of an order payload.

    Lines keep their array order. A (product_id, variant_id) pair may appear
    only once per order because updates match old and new lines on that key.
    """
    raw_lines = payload.get("products")
    if not isinstance(raw_lines, list) or not raw_lines:
        raise ValidationError("products must be a non-empty list")

    lines: list[LineItemInput] = []
    seen: set[tuple[int, int]] = set()
    for index, raw in enumerate(raw_lines):
        prefix = f"products[{index}]."
        if not isinstance(raw, dict):
            raise ValidationError(f"products[{index}] must be an object")

        line = LineItemInput(
            product_id=_required_int(raw, "product_id", minimum=1, maximum=MAX_ID, prefix=prefix),
            variant_id=_required_int(raw, "variant_id", minimum=1, maximum=MAX_ID, prefix=prefix),
            unit=_required_int(raw, "unit", minimum=1, maximum=MAX_QUANTITY, prefix=prefix),
            carton=_required_int(raw, "carton", minimum=1, maximum=MAX_QUANTITY, prefix=prefix),
            quantity=_required_int(raw, "quantity", minimum=1, maximum=MAX_QUANTITY, prefix=prefix),
            mrp_cents=_required_int(raw, "mrp_cents", minimum=0, maximum=MAX_PRICE_CENTS, prefix=prefix),
            unit_price_cents=_required_int(raw, "unit_price_cents", minimum=0, maximum=MAX_PRICE_CENTS, prefix=prefix),
            gst_rate_bps=_required_int(raw, "gst_rate_bps", minimum=0, maximum=MAX_RATE_BPS, prefix=prefix),
            gst_amount_cents=_required_int(raw, "gst_amount_cents", minimum=0, maximum=MAX_PRICE_CENTS, prefix=prefix),
            line_total_cents=_required_int(raw, "line_total_cents", minimum=0, maximum=MAX_PRICE_CENTS, prefix=prefix),
        )
        if line.key in seen:
            raise ValidationError(
                f"products[{index}] repeats product {line.product_id} variant {line.variant_id}"
            )
        seen.add(line.key)
        lines.append(line)

    return lines


def parse_document_header(payload: dict, *, require_payment_method: bool) -> dict:
    """
    Validate the totals and payment fields shared by sales and purchase orders.

    Returns a dict of column values ready to be set on the document.
    """
    header = {
        "sub_total_cents": _required_int(payload, "sub_total_cents", minimum=0, maximum=MAX_PRICE_CENTS),
        "total_gst_cents": _required_int(payload, "total_gst_cents", minimum=0, maximum=MAX_PRICE_CENTS),
        # Round-off may go either way
        "round_off_cents": _required_int(payload, "round_off_cents", minimum=-MAX_PRICE_CENTS, maximum=MAX_PRICE_CENTS),
        "total_cents": _required_int(payload, "total_cents", minimum=0, maximum=MAX_PRICE_CENTS),
        "payment_status": _required_str(payload, "payment_status", 32),
        "notes": _optional_str(payload, "notes", 2000),
    }

    if require_payment_method:
        header["payment_method"] = _required_str(payload, "payment_method", 32)
    else:
        header["payment_method"] = _optional_str(payload, "payment_method", 32)

    try:
        header["payment_detail"] = PaymentDetail.from_payload(payload)
    except ValueError as e:
        raise ValidationError(str(e))

    return header


def parse_party_payload(payload: dict) -> dict:
    """Validate a customer or supplier create payload."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return {
        "name": _required_str(payload, "name", 255),
        "number": _required_str(payload, "number", 32),
        "email": _optional_str(payload, "email", 255),
        "address": _optional_str(payload, "address", 1000),
    }


def parse_supplier_payload(payload: dict) -> dict:
    data = parse_party_payload(payload)
    data["gst_number"] = _optional_str(payload, "gst_number", 32)
    return data


def parse_payment_payload(payload: dict, party_field: str) -> dict:
    """Validate a customer/supplier payment payload."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return {
        party_field: _required_int(payload, party_field, minimum=1, maximum=MAX_ID),
        "amount_cents": _required_int(payload, "amount_cents", minimum=1, maximum=MAX_PRICE_CENTS),
        "payment_type": _required_str(payload, "payment_type", 32),
        "payment_mode": _required_str(payload, "payment_mode", 32),
    }


def parse_variant_payload(raw: dict, index: int) -> dict:
    """Validate one variant of a product create payload."""
    prefix = f"variants[{index}]."
    if not isinstance(raw, dict):
        raise ValidationError(f"variants[{index}] must be an object")
    return {
        "packing_size": _required_str(raw, "packing_size", 64),
        "sku": _required_str(raw, "sku", 64),
        "barcode": _optional_str(raw, "barcode", 64),
        "retail_price_cents": _required_int(raw, "retail_price_cents", minimum=0, maximum=MAX_PRICE_CENTS, prefix=prefix),
        "wholesale_price_cents": _required_int(raw, "wholesale_price_cents", minimum=0, maximum=MAX_PRICE_CENTS, prefix=prefix),
        "purchase_price_cents": _required_int(raw, "purchase_price_cents", minimum=0, maximum=MAX_PRICE_CENTS, prefix=prefix),
        "tax_rate_bps": _required_int(raw, "tax_rate_bps", minimum=0, maximum=MAX_RATE_BPS, prefix=prefix),
        "min_stock_level": _required_int(raw, "min_stock_level", minimum=0, maximum=MAX_QUANTITY, prefix=prefix),
        "quantity": _required_int(raw, "quantity", minimum=0, maximum=MAX_QUANTITY, prefix=prefix) if raw.get("quantity") is not None else 0,
    }
