# Overview: Service-layer operations for customer and supplier payments; encapsulates business logic and database work.

"""
Payment Service

Records money received from customers and paid out to suppliers. Payments
are independent of orders and never touch stock. Each new payment yields a
"payment" notification event for the caller to dispatch.
"""

from ..extensions import db
from ..models import CustomerPayment, SupplierPayment
from ..validation import NotFoundError, parse_payment_payload
from .customer_service import get_customer
from .notification_service import (
    WorkflowResult,
    build_customer_payment_event,
    build_supplier_payment_event,
)
from .supplier_service import get_supplier


# =============================================================================
# CUSTOMER PAYMENTS
# =============================================================================

def create_customer_payment(*, owner_id: int, user_id: int, payload: dict) -> WorkflowResult:
    data = parse_payment_payload(payload, "customer_id")
    customer = get_customer(owner_id, data["customer_id"])

    payment = CustomerPayment(owner_id=owner_id, user_id=user_id, **data)
    db.session.add(payment)
    db.session.commit()

    event = build_customer_payment_event(
        owner_id=owner_id,
        user_id=user_id,
        customer_id=customer.id,
        customer_name=customer.name,
        amount_cents=payment.amount_cents,
    )
    return WorkflowResult(payment, [event])


def list_customer_payments(owner_id: int, customer_id: int | None = None) -> list[CustomerPayment]:
    q = db.session.query(CustomerPayment).filter_by(owner_id=owner_id, is_deleted=False)
    if customer_id is not None:
        q = q.filter_by(customer_id=customer_id)
    return q.order_by(CustomerPayment.created_at.desc(), CustomerPayment.id.desc()).all()


def _get_customer_payment(owner_id: int, payment_id: int) -> CustomerPayment:
    payment = db.session.query(CustomerPayment).filter_by(
        id=payment_id, owner_id=owner_id, is_deleted=False
    ).first()
    if payment is None:
        raise NotFoundError("Customer payment not found")
    return payment


def update_customer_payment(owner_id: int, payment_id: int, payload: dict) -> CustomerPayment:
    """Correct a recorded payment. No notification is raised for edits."""
    payment = _get_customer_payment(owner_id, payment_id)
    data = parse_payment_payload(payload, "customer_id")
    get_customer(owner_id, data["customer_id"])

    for name, value in data.items():
        setattr(payment, name, value)
    db.session.commit()
    return payment


def delete_customer_payment(owner_id: int, payment_id: int) -> CustomerPayment:
    payment = _get_customer_payment(owner_id, payment_id)
    payment.is_deleted = True
    db.session.commit()
    return payment


# =============================================================================
# SUPPLIER PAYMENTS
# =============================================================================

def create_supplier_payment(*, owner_id: int, user_id: int, payload: dict) -> WorkflowResult:
    data = parse_payment_payload(payload, "supplier_id")
    supplier = get_supplier(owner_id, data["supplier_id"])

    payment = SupplierPayment(owner_id=owner_id, user_id=user_id, **data)
    db.session.add(payment)
    db.session.commit()

    event = build_supplier_payment_event(
        owner_id=owner_id,
        user_id=user_id,
        supplier_id=supplier.id,
        supplier_name=supplier.name,
        amount_cents=payment.amount_cents,
    )
    return WorkflowResult(payment, [event])


def list_supplier_payments(owner_id: int, supplier_id: int | None = None) -> list[SupplierPayment]:
    q = db.session.query(SupplierPayment).filter_by(owner_id=owner_id, is_deleted=False)
    if supplier_id is not None:
        q = q.filter_by(supplier_id=supplier_id)
    return q.order_by(SupplierPayment.created_at.desc(), SupplierPayment.id.desc()).all()


def _get_supplier_payment(owner_id: int, payment_id: int) -> SupplierPayment:
    payment = db.session.query(SupplierPayment).filter_by(
        id=payment_id, owner_id=owner_id, is_deleted=False
    ).first()
    if payment is None:
        raise NotFoundError("Supplier payment not found")
    return payment


def update_supplier_payment(owner_id: int, payment_id: int, payload: dict) -> SupplierPayment:
    """Correct a recorded payment. No notification is raised for edits."""
    payment = _get_supplier_payment(owner_id, payment_id)
    data = parse_payment_payload(payload, "supplier_id")
    get_supplier(owner_id, data["supplier_id"])

    for name, value in data.items():
        setattr(payment, name, value)
    db.session.commit()
    return payment


def delete_supplier_payment(owner_id: int, payment_id: int) -> SupplierPayment:
    payment = _get_supplier_payment(owner_id, payment_id)
    payment.is_deleted = True
    db.session.commit()
    return payment
