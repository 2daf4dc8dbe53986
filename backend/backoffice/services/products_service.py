# Overview: Service-layer operations for products and variant stock reads.

"""
Product catalogue and Variant Quantity Store reads.

Variant quantity is exclusively owned by the product catalogue. Order
workflows only read it through get_variant() and change it through
stock_service; they never hold ProductVariant ORM objects.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..extensions import db
from ..models import Product, ProductVariant
from ..validation import NotFoundError, ValidationError, coerce_int, parse_variant_payload


@dataclass(frozen=True)
class VariantSnapshot:
    """Point-in-time read of one variant's stock figures."""
    product_id: int
    variant_id: int
    product_name: str
    packing_size: str
    quantity: int
    min_stock_level: int

    @property
    def label(self) -> str:
        return f"{self.product_name} {self.packing_size}"


def get_variant(product_id: int, variant_id: int, owner_id: int | None = None) -> VariantSnapshot:
    """
    Read the current quantity and threshold of (product_id, variant_id).

    Selects columns rather than entities so the figures always come from the
    database, never from a stale object in the session identity map.

    When owner_id is given the product must belong to that owner and must not
    be soft-deleted.
    """
    row = (
        db.session.query(
            ProductVariant.id,
            ProductVariant.product_id,
            ProductVariant.packing_size,
            ProductVariant.quantity,
            ProductVariant.min_stock_level,
            Product.name,
            Product.owner_id,
            Product.is_deleted,
        )
        .join(Product, Product.id == ProductVariant.product_id)
        .filter(
            ProductVariant.product_id == product_id,
            ProductVariant.id == variant_id,
        )
        .first()
    )

    if row is None:
        raise NotFoundError(f"Product {product_id} variant {variant_id} not found")
    if owner_id is not None and (row.owner_id != owner_id or row.is_deleted):
        raise NotFoundError(f"Product {product_id} variant {variant_id} not found")

    return VariantSnapshot(
        product_id=row.product_id,
        variant_id=row.id,
        product_name=row.name,
        packing_size=row.packing_size,
        quantity=row.quantity,
        min_stock_level=row.min_stock_level,
    )


def create_product(*, owner_id: int, user_id: int | None, payload: dict) -> Product:
    """
    Create a product with its ordered variants.

    Opening quantities given here are catalogue data, not stock movements;
    later changes must go through purchase/sales orders.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    name = str(payload.get("name") or "").strip()
    unit = str(payload.get("unit") or "").strip()
    if not name:
        raise ValidationError("name is required")
    if not unit:
        raise ValidationError("unit is required")

    raw_variants = payload.get("variants")
    if not isinstance(raw_variants, list) or not raw_variants:
        raise ValidationError("variants must be a non-empty list")

    variants = [parse_variant_payload(raw, i) for i, raw in enumerate(raw_variants)]
    skus = [v["sku"] for v in variants]
    if len(set(skus)) != len(skus):
        raise ValidationError("variant SKUs must be unique within a product")

    product = Product(
        owner_id=owner_id,
        user_id=user_id,
        name=name,
        unit=unit,
        description=payload.get("description"),
    )
    for position, fields in enumerate(variants):
        product.variants.append(ProductVariant(position=position, **fields))

    db.session.add(product)
    db.session.commit()
    return product


def get_product(owner_id: int, product_id: int) -> Product:
    product = db.session.query(Product).filter_by(
        id=product_id, owner_id=owner_id, is_deleted=False
    ).first()
    if product is None:
        raise NotFoundError("Product not found")
    return product


def update_product(*, owner_id: int, product_id: int, payload: dict) -> Product:
    """
    Update product fields and variant catalogue data.

    Variants carrying an `id` are updated in place; variants without one are
    added with zero stock. Variants missing from the payload are kept, since
    orders and stock movements still reference them. A variant's quantity is
    never written here; it only moves through stock_service.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    product = get_product(owner_id, product_id)

    # Validate everything before touching the ORM objects
    changes = {}
    for field in ("name", "unit"):
        if field in payload:
            value = str(payload.get(field) or "").strip()
            if not value:
                raise ValidationError(f"{field} cannot be empty")
            changes[field] = value
    if "description" in payload:
        changes["description"] = payload.get("description")

    raw_variants = payload.get("variants")
    if raw_variants is None:
        raw_variants = []
    if not isinstance(raw_variants, list):
        raise ValidationError("variants must be a list")

    existing = {v.id: v for v in product.variants}
    skus = {v.id: v.sku for v in product.variants}
    updates = []
    additions = []
    for index, raw in enumerate(raw_variants):
        fields = parse_variant_payload(raw, index)
        fields.pop("quantity")
        if raw.get("id") is None:
            additions.append(fields)
            continue
        variant = existing.get(coerce_int(raw["id"], f"variants[{index}].id"))
        if variant is None:
            raise NotFoundError(f"Variant {raw['id']} not found on product {product_id}")
        skus[variant.id] = fields["sku"]
        updates.append((variant, fields))

    all_skus = list(skus.values()) + [fields["sku"] for fields in additions]
    if len(set(all_skus)) != len(all_skus):
        raise ValidationError("variant SKUs must be unique within a product")

    for name, value in changes.items():
        setattr(product, name, value)
    for variant, fields in updates:
        for name, value in fields.items():
            setattr(variant, name, value)
    for fields in additions:
        product.variants.append(
            ProductVariant(position=len(product.variants), quantity=0, **fields)
        )

    db.session.commit()
    return product


def delete_product(owner_id: int, product_id: int) -> Product:
    """Soft delete; its variants drop out of order validation and low-stock listings."""
    product = get_product(owner_id, product_id)
    product.is_deleted = True
    db.session.commit()
    return product


def list_products(owner_id: int) -> list[Product]:
    """Non-deleted products of an owner; variants carry their stock_status."""
    return (
        db.session.query(Product)
        .filter_by(owner_id=owner_id, is_deleted=False)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )


def list_low_stock_variants(owner_id: int | None = None) -> list[ProductVariant]:
    """Variants currently below their minimum stock level."""
    q = (
        db.session.query(ProductVariant)
        .join(Product, Product.id == ProductVariant.product_id)
        .filter(
            Product.is_deleted.is_(False),
            ProductVariant.quantity < ProductVariant.min_stock_level,
        )
    )
    if owner_id is not None:
        q = q.filter(Product.owner_id == owner_id)
    return q.order_by(ProductVariant.quantity.asc(), ProductVariant.id.asc()).all()
