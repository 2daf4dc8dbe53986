# Overview: Service-layer helpers shared by sales and purchase orders; invoice numbers, headers and lines.

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..models import Order, PurchaseOrder
from ..validation import InsufficientStockError, LineItemInput, ValidationError
from backoffice.time_utils import epoch_millis, utcnow
from .products_service import VariantSnapshot


HEADER_FIELDS = (
    "sub_total_cents",
    "total_gst_cents",
    "round_off_cents",
    "total_cents",
    "payment_method",
    "payment_status",
    "notes",
)

LINE_FIELDS = (
    "product_id",
    "variant_id",
    "unit",
    "carton",
    "quantity",
    "mrp_cents",
    "unit_price_cents",
    "gst_rate_bps",
    "gst_amount_cents",
    "line_total_cents",
)

INVOICE_MODELS = (Order, PurchaseOrder)


def next_invoice_number(now: datetime | None = None) -> str:
    """
    Allocate INV-YYYYMMDD-<epoch ms> for a sales or purchase order.

    Numbers are shared by both document tables. If the number is already
    taken in either of them the millisecond part is bumped until a free one
    is found. The unique constraints on invoice_number still guard
    concurrent writers.
    """
    now = now or utcnow()
    day = now.strftime("%Y%m%d")
    millis = epoch_millis(now)

    while True:
        candidate = f"INV-{day}-{millis}"
        taken = any(
            db.session.query(model.id).filter(model.invoice_number == candidate).first() is not None
            for model in INVOICE_MODELS
        )
        if not taken:
            return candidate
        millis += 1


def apply_header(document, header: dict) -> None:
    for name in HEADER_FIELDS:
        setattr(document, name, header[name])
    document.payment_detail = header["payment_detail"]


def previous_quantities(document) -> dict[tuple[int, int], int]:
    """Map (product_id, variant_id) to the quantity currently on the document."""
    return {(line.product_id, line.variant_id): line.quantity for line in document.lines}


def ensure_no_removed_lines(previous: dict[tuple[int, int], int], lines: list[LineItemInput]) -> None:
    """Updates may change or add lines but never drop an existing one."""
    kept = {line.key for line in lines}
    removed = [key for key in previous if key not in kept]
    if removed:
        product_id, variant_id = removed[0]
        raise ValidationError(
            f"Line for product {product_id} variant {variant_id} cannot be removed on update"
        )


def sync_lines(document, lines: list[LineItemInput], line_model) -> None:
    """
    Write validated lines onto the document in array order.

    Existing lines matched on (product_id, variant_id) are updated in place;
    unmatched lines are appended.
    """
    existing = {(line.product_id, line.variant_id): line for line in document.lines}
    for position, item in enumerate(lines):
        line = existing.get(item.key)
        if line is None:
            line = line_model()
            document.lines.append(line)
        line.position = position
        for name in LINE_FIELDS:
            setattr(line, name, getattr(item, name))


def insufficient_stock(action: str, snapshot: VariantSnapshot, requested: int) -> InsufficientStockError:
    return InsufficientStockError(
        f"Cannot {action}: {snapshot.label} has only {snapshot.quantity} in stock, "
        f"but {requested} is required.",
        product_id=snapshot.product_id,
        variant_id=snapshot.variant_id,
        requested=requested,
        available=snapshot.quantity,
    )


def update_requirement(old_quantity: int, new_quantity: int) -> int:
    """
    Stock that must be on hand for a line changing from old to new quantity.

    Growing a line needs the increment; shrinking one needs the freed amount.
    """
    if old_quantity < new_quantity:
        return new_quantity - old_quantity
    return old_quantity - new_quantity
