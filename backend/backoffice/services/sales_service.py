# Overview: Service-layer operations for sales orders; stock-checked create, update and delete.

"""
Sales Order Workflow

Every workflow runs in two phases:

1. Validation: read each line's variant in array order and reject the whole
   request on the first line that cannot be satisfied. Nothing is written.
2. Posting: commit the order document, then post each line's stock
   movement and quantity change in its own commit
   (stock_service.post_line_movements).

Workflows return a WorkflowResult; notification events in it are written
by the caller.
"""

from __future__ import annotations

from ..extensions import db
from ..models import Order, OrderLine
from ..validation import (
    NotFoundError,
    ValidationError,
    parse_document_header,
    parse_line_items,
    required_id,
)
from .auth_service import get_owner_user
from .customer_service import CUSTOMER_TYPES, get_customer
from .document_service import (
    apply_header,
    ensure_no_removed_lines,
    insufficient_stock,
    next_invoice_number,
    previous_quantities,
    sync_lines,
    update_requirement,
)
from .ledger_service import MOVEMENT_DELETE_SALE, MOVEMENT_SALE, MOVEMENT_UPDATE_SALE
from .notification_service import WorkflowResult, build_low_stock_alert, build_order_created_event
from .products_service import get_variant
from .stock_service import LinePosting, post_line_movements


REFERENCE_TYPE = "order"


def _customer_type(payload: dict, default: str) -> str:
    value = payload.get("customer_type")
    if value is None or str(value).strip() == "":
        return default
    value = str(value).strip().lower()
    if value not in CUSTOMER_TYPES:
        raise ValidationError("customer_type must be retail or wholesale")
    return value


def get_order(owner_id: int, order_id: int) -> Order:
    """Live (not soft-deleted) order of the owner, else NotFoundError."""
    order = db.session.query(Order).filter_by(
        id=order_id, owner_id=owner_id, is_deleted=False
    ).first()
    if order is None:
        raise NotFoundError("Order not found")
    return order


def list_orders(owner_id: int) -> list[Order]:
    return (
        db.session.query(Order)
        .filter_by(owner_id=owner_id, is_deleted=False)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_orders_by_customer(owner_id: int, customer_id: int) -> list[Order]:
    get_customer(owner_id, customer_id)
    return (
        db.session.query(Order)
        .filter_by(owner_id=owner_id, customer_id=customer_id, is_deleted=False)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def create_order(*, owner_id: int, user_id: int, payload: dict) -> WorkflowResult:
    """
    Create a sales order and take its quantities out of stock.

    Raises:
        ValidationError: malformed payload or a line exceeding available stock
        NotFoundError: unknown user, customer or variant
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    user = get_owner_user(owner_id, user_id)
    header = parse_document_header(payload, require_payment_method=True)
    lines = parse_line_items(payload)
    customer = get_customer(owner_id, required_id(payload, "customer_id"))
    customer_type = _customer_type(payload, customer.customer_type)

    for line in lines:
        snapshot = get_variant(line.product_id, line.variant_id, owner_id=owner_id)
        if snapshot.quantity < line.quantity:
            raise insufficient_stock("create order", snapshot, line.quantity)

    order = Order(
        owner_id=owner_id,
        user_id=user.id,
        customer_id=customer.id,
        customer_type=customer_type,
        invoice_number=next_invoice_number(),
    )
    apply_header(order, header)
    sync_lines(order, lines, OrderLine)
    db.session.add(order)
    db.session.commit()

    post_line_movements(
        owner_id=owner_id,
        user_id=user.id,
        movement_type=MOVEMENT_SALE,
        reference_type=REFERENCE_TYPE,
        reference_id=order.id,
        postings=[
            LinePosting(line.product_id, line.variant_id, quantity=line.quantity, delta=-line.quantity)
            for line in lines
        ],
        note=f"Sale {order.invoice_number}",
    )

    events = [
        build_order_created_event(
            owner_id=owner_id,
            user_id=user.id,
            order_id=order.id,
            invoice_number=order.invoice_number,
            user_name=user.name,
        )
    ]
    # One check per line, against the quantity left after posting
    for line in lines:
        alert = build_low_stock_alert(
            get_variant(line.product_id, line.variant_id), owner_id, user.id
        )
        if alert is not None:
            events.append(alert)

    return WorkflowResult(order, events)


def update_order(*, owner_id: int, user_id: int, order_id: int, payload: dict) -> WorkflowResult:
    """
    Replace an order's header and lines and move stock by the difference.

    Lines are matched to the stored order by (product_id, variant_id); a new
    key counts as an old quantity of zero. Existing lines cannot be removed.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    user = get_owner_user(owner_id, user_id)
    order = get_order(owner_id, order_id)
    header = parse_document_header(payload, require_payment_method=True)
    lines = parse_line_items(payload)

    customer = order.customer
    if payload.get("customer_id") is not None:
        customer = get_customer(owner_id, required_id(payload, "customer_id"))
    customer_type = _customer_type(payload, order.customer_type)

    previous = previous_quantities(order)
    ensure_no_removed_lines(previous, lines)

    for line in lines:
        snapshot = get_variant(line.product_id, line.variant_id, owner_id=owner_id)
        required = update_requirement(previous.get(line.key, 0), line.quantity)
        if snapshot.quantity < required:
            raise insufficient_stock("update order", snapshot, required)

    order.user_id = user.id
    order.customer_id = customer.id
    order.customer_type = customer_type
    apply_header(order, header)
    sync_lines(order, lines, OrderLine)
    db.session.commit()

    postings = []
    for line in lines:
        old_quantity = previous.get(line.key, 0)
        net = old_quantity - line.quantity
        # Sold more: take the extra out. Sold less: put the difference back.
        delta = -abs(net) if net < 0 else net
        postings.append(LinePosting(
            line.product_id,
            line.variant_id,
            quantity=line.quantity,
            delta=delta,
            note=f"Update {order.invoice_number}: {old_quantity} -> {line.quantity}",
        ))

    post_line_movements(
        owner_id=owner_id,
        user_id=user.id,
        movement_type=MOVEMENT_UPDATE_SALE,
        reference_type=REFERENCE_TYPE,
        reference_id=order.id,
        postings=postings,
    )
    return WorkflowResult(order)


def delete_order(*, owner_id: int, user_id: int, order_id: int) -> WorkflowResult:
    """
    Soft delete an order and return its quantities to stock.

    No stock check is made before returning quantities.
    """
    user = get_owner_user(owner_id, user_id)
    order = get_order(owner_id, order_id)

    order.is_deleted = True
    db.session.commit()

    post_line_movements(
        owner_id=owner_id,
        user_id=user.id,
        movement_type=MOVEMENT_DELETE_SALE,
        reference_type=REFERENCE_TYPE,
        reference_id=order.id,
        postings=[
            LinePosting(line.product_id, line.variant_id, quantity=line.quantity, delta=line.quantity)
            for line in order.lines
        ],
        note=f"Delete {order.invoice_number}",
    )
    return WorkflowResult(order)
