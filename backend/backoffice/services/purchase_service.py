# Overview: Service-layer operations for purchase orders; stock-receiving create, update and delete.

"""
Purchase Order Workflow

Mirror of the sales workflow with the stock direction reversed: creating a
purchase order brings stock in, deleting one takes it back out. Creation
needs no stock check; update and delete are checked against the variant's
current quantity before anything is written.
"""

from __future__ import annotations

from ..extensions import db
from ..models import PurchaseOrder, PurchaseOrderLine
from ..validation import (
    NotFoundError,
    ValidationError,
    parse_document_header,
    parse_line_items,
    required_id,
)
from .auth_service import get_owner_user
from .document_service import (
    apply_header,
    ensure_no_removed_lines,
    insufficient_stock,
    next_invoice_number,
    previous_quantities,
    sync_lines,
    update_requirement,
)
from .ledger_service import MOVEMENT_DELETE_PURCHASE, MOVEMENT_PURCHASE, MOVEMENT_UPDATE_PURCHASE
from .notification_service import WorkflowResult
from .products_service import get_variant
from .stock_service import LinePosting, post_line_movements
from .supplier_service import get_supplier


REFERENCE_TYPE = "purchase_order"


def get_purchase_order(owner_id: int, purchase_order_id: int) -> PurchaseOrder:
    purchase_order = db.session.query(PurchaseOrder).filter_by(
        id=purchase_order_id, owner_id=owner_id, is_deleted=False
    ).first()
    if purchase_order is None:
        raise NotFoundError("Purchase order not found")
    return purchase_order


def list_purchase_orders(owner_id: int) -> list[PurchaseOrder]:
    return (
        db.session.query(PurchaseOrder)
        .filter_by(owner_id=owner_id, is_deleted=False)
        .order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc())
        .all()
    )


def list_purchase_orders_by_supplier(owner_id: int, supplier_id: int) -> list[PurchaseOrder]:
    get_supplier(owner_id, supplier_id)
    return (
        db.session.query(PurchaseOrder)
        .filter_by(owner_id=owner_id, supplier_id=supplier_id, is_deleted=False)
        .order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc())
        .all()
    )


def create_purchase_order(*, owner_id: int, user_id: int, payload: dict) -> WorkflowResult:
    """
    Create a purchase order and add its quantities to stock.

    Raises:
        ValidationError: malformed payload
        NotFoundError: unknown user, supplier or variant
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    user = get_owner_user(owner_id, user_id)
    header = parse_document_header(payload, require_payment_method=False)
    lines = parse_line_items(payload)
    supplier = get_supplier(owner_id, required_id(payload, "supplier_id"))

    # Variants must exist even though no stock check applies
    for line in lines:
        get_variant(line.product_id, line.variant_id, owner_id=owner_id)

    purchase_order = PurchaseOrder(
        owner_id=owner_id,
        user_id=user.id,
        supplier_id=supplier.id,
        invoice_number=next_invoice_number(),
    )
    apply_header(purchase_order, header)
    sync_lines(purchase_order, lines, PurchaseOrderLine)
    db.session.add(purchase_order)
    db.session.commit()

    post_line_movements(
        owner_id=owner_id,
        user_id=user.id,
        movement_type=MOVEMENT_PURCHASE,
        reference_type=REFERENCE_TYPE,
        reference_id=purchase_order.id,
        postings=[
            LinePosting(line.product_id, line.variant_id, quantity=line.quantity, delta=line.quantity)
            for line in lines
        ],
        note=f"Purchase {purchase_order.invoice_number}",
    )
    return WorkflowResult(purchase_order)


def update_purchase_order(*, owner_id: int, user_id: int, purchase_order_id: int, payload: dict) -> WorkflowResult:
    """
    Replace a purchase order's header and lines and move stock by the difference.

    The same stock check as sales updates applies, including when the
    purchased quantity grows.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    user = get_owner_user(owner_id, user_id)
    purchase_order = get_purchase_order(owner_id, purchase_order_id)
    header = parse_document_header(payload, require_payment_method=False)
    lines = parse_line_items(payload)

    supplier = purchase_order.supplier
    if payload.get("supplier_id") is not None:
        supplier = get_supplier(owner_id, required_id(payload, "supplier_id"))

    previous = previous_quantities(purchase_order)
    ensure_no_removed_lines(previous, lines)

    for line in lines:
        snapshot = get_variant(line.product_id, line.variant_id, owner_id=owner_id)
        required = update_requirement(previous.get(line.key, 0), line.quantity)
        if snapshot.quantity < required:
            raise insufficient_stock("update purchase order", snapshot, required)

    purchase_order.user_id = user.id
    purchase_order.supplier_id = supplier.id
    apply_header(purchase_order, header)
    sync_lines(purchase_order, lines, PurchaseOrderLine)
    db.session.commit()

    postings = []
    for line in lines:
        old_quantity = previous.get(line.key, 0)
        net = old_quantity - line.quantity
        # Bought more: bring the extra in. Bought less: take the difference out.
        delta = abs(net) if net < 0 else -net
        postings.append(LinePosting(
            line.product_id,
            line.variant_id,
            quantity=line.quantity,
            delta=delta,
            note=f"Update {purchase_order.invoice_number}: {old_quantity} -> {line.quantity}",
        ))

    post_line_movements(
        owner_id=owner_id,
        user_id=user.id,
        movement_type=MOVEMENT_UPDATE_PURCHASE,
        reference_type=REFERENCE_TYPE,
        reference_id=purchase_order.id,
        postings=postings,
    )
    return WorkflowResult(purchase_order)


def delete_purchase_order(*, owner_id: int, user_id: int, purchase_order_id: int) -> WorkflowResult:
    """
    Soft delete a purchase order and take its quantities back out of stock.

    Rejected if any line's variant no longer holds the purchased quantity.
    """
    user = get_owner_user(owner_id, user_id)
    purchase_order = get_purchase_order(owner_id, purchase_order_id)

    for line in purchase_order.lines:
        snapshot = get_variant(line.product_id, line.variant_id)
        if snapshot.quantity < line.quantity:
            raise insufficient_stock("delete purchase order", snapshot, line.quantity)

    purchase_order.is_deleted = True
    db.session.commit()

    post_line_movements(
        owner_id=owner_id,
        user_id=user.id,
        movement_type=MOVEMENT_DELETE_PURCHASE,
        reference_type=REFERENCE_TYPE,
        reference_id=purchase_order.id,
        postings=[
            LinePosting(line.product_id, line.variant_id, quantity=line.quantity, delta=-line.quantity)
            for line in purchase_order.lines
        ],
        note=f"Delete {purchase_order.invoice_number}",
    )
    return WorkflowResult(purchase_order)
