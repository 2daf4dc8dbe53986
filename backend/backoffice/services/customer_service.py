# Overview: Service-layer operations for customers; encapsulates business logic and database work.

from __future__ import annotations

from ..extensions import db
from ..models import Customer
from ..validation import NotFoundError, ValidationError, parse_party_payload


CUSTOMER_TYPES = {"retail", "wholesale"}


def create_customer(*, owner_id: int, user_id: int | None, payload: dict) -> Customer:
    data = parse_party_payload(payload)

    customer_type = str(payload.get("customer_type") or "retail").strip().lower()
    if customer_type not in CUSTOMER_TYPES:
        raise ValidationError("customer_type must be retail or wholesale")

    # Phone number identifies a customer within an owner
    existing = db.session.query(Customer.id).filter(
        Customer.owner_id == owner_id,
        Customer.number == data["number"],
    ).first()
    if existing:
        raise ValidationError(f"Customer with number '{data['number']}' already exists")

    customer = Customer(owner_id=owner_id, user_id=user_id, customer_type=customer_type, **data)
    db.session.add(customer)
    db.session.commit()
    return customer


def get_customer(owner_id: int, customer_id: int) -> Customer:
    customer = db.session.query(Customer).filter_by(
        id=customer_id, owner_id=owner_id, is_deleted=False
    ).first()
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


def list_customers(owner_id: int) -> list[Customer]:
    return (
        db.session.query(Customer)
        .filter_by(owner_id=owner_id, is_deleted=False)
        .order_by(Customer.name.asc())
        .all()
    )


def update_customer(owner_id: int, customer_id: int, payload: dict) -> Customer:
    """Replace a customer's contact details; the number stays unique per owner."""
    customer = get_customer(owner_id, customer_id)
    data = parse_party_payload(payload)

    customer_type = str(payload.get("customer_type") or customer.customer_type).strip().lower()
    if customer_type not in CUSTOMER_TYPES:
        raise ValidationError("customer_type must be retail or wholesale")

    existing = db.session.query(Customer.id).filter(
        Customer.owner_id == owner_id,
        Customer.number == data["number"],
        Customer.id != customer.id,
    ).first()
    if existing:
        raise ValidationError(f"Customer with number '{data['number']}' already exists")

    for name, value in data.items():
        setattr(customer, name, value)
    customer.customer_type = customer_type
    db.session.commit()
    return customer


def delete_customer(owner_id: int, customer_id: int) -> Customer:
    customer = get_customer(owner_id, customer_id)
    customer.is_deleted = True
    db.session.commit()
    return customer
