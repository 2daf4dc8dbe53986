# Overview: Service-layer operations for suppliers; encapsulates business logic and database work.

"""
Supplier Service

MULTI-TENANT: Suppliers are scoped to owners via owner_id.
A supplier's phone number is unique within an owner.

Every purchase order references exactly one supplier. Suppliers are never
physically removed because purchase orders and payments keep pointing at
them.
"""

from __future__ import annotations

from ..extensions import db
from ..models import Supplier
from ..validation import NotFoundError, ValidationError, parse_supplier_payload


def create_supplier(*, owner_id: int, user_id: int | None, payload: dict) -> Supplier:
    """
    Create a new supplier.

    Raises:
        ValidationError: malformed payload or duplicate phone number
    """
    data = parse_supplier_payload(payload)

    existing = db.session.query(Supplier.id).filter(
        Supplier.owner_id == owner_id,
        Supplier.number == data["number"],
    ).first()
    if existing:
        raise ValidationError(f"Supplier with number '{data['number']}' already exists")

    supplier = Supplier(owner_id=owner_id, user_id=user_id, **data)
    db.session.add(supplier)
    db.session.commit()
    return supplier


def get_supplier(owner_id: int, supplier_id: int) -> Supplier:
    supplier = db.session.query(Supplier).filter_by(
        id=supplier_id, owner_id=owner_id, is_deleted=False
    ).first()
    if supplier is None:
        raise NotFoundError("Supplier not found")
    return supplier


def list_suppliers(owner_id: int) -> list[Supplier]:
    return (
        db.session.query(Supplier)
        .filter_by(owner_id=owner_id, is_deleted=False)
        .order_by(Supplier.name.asc())
        .all()
    )


def update_supplier(owner_id: int, supplier_id: int, payload: dict) -> Supplier:
    """Replace a supplier's contact and GST details."""
    supplier = get_supplier(owner_id, supplier_id)
    data = parse_supplier_payload(payload)

    existing = db.session.query(Supplier.id).filter(
        Supplier.owner_id == owner_id,
        Supplier.number == data["number"],
        Supplier.id != supplier.id,
    ).first()
    if existing:
        raise ValidationError(f"Supplier with number '{data['number']}' already exists")

    for name, value in data.items():
        setattr(supplier, name, value)
    db.session.commit()
    return supplier


def delete_supplier(owner_id: int, supplier_id: int) -> Supplier:
    """Soft delete; existing purchase orders keep their reference."""
    supplier = get_supplier(owner_id, supplier_id)
    supplier.is_deleted = True
    db.session.commit()
    return supplier
