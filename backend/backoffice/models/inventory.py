from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import to_utc_z


STOCK_STATUS_OUT = "Out of Stock"
STOCK_STATUS_LOW = "Low Stock"
STOCK_STATUS_IN = "In Stock"


class Product(db.Model):
    """
    Product master data.

    MULTI-TENANT: Products are scoped to owners via owner_id.

    A product owns an ordered list of variants (packing sizes). Stock is
    tracked per variant, never on the product itself.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_owner_name", "owner_id", "name"),
        db.Index("ix_products_owner_deleted", "owner_id", "is_deleted"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("owners.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    name = db.Column(db.String(255), nullable=False)
    unit = db.Column(db.String(32), nullable=False)
    description = db.Column(db.Text, nullable=True)

    is_deleted = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    variants = db.relationship(
        "ProductVariant",
        back_populates="product",
        order_by="ProductVariant.position",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} owner_id={self.owner_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "user_id": self.user_id,
            "name": self.name,
            "unit": self.unit,
            "description": self.description,
            "variants": [v.to_dict() for v in self.variants],
            "variants_count": len(self.variants),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class ProductVariant(db.Model):
    """
    A packing/SKU configuration of a product; the unit of stock tracking.

    quantity is mutated ONLY through services.stock_service (single-row
    atomic UPDATE). Never assign to it from order workflows.
    """
    __tablename__ = "product_variants"
    __table_args__ = (
        db.UniqueConstraint("product_id", "sku", name="uq_variants_product_sku"),
        db.Index("ix_variants_product_position", "product_id", "position"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    packing_size = db.Column(db.String(64), nullable=False)
    sku = db.Column(db.String(64), nullable=False)
    barcode = db.Column(db.String(64), nullable=True)

    # Authoritative storage in cents
    retail_price_cents = db.Column(db.Integer, nullable=False, default=0)
    wholesale_price_cents = db.Column(db.Integer, nullable=False, default=0)
    purchase_price_cents = db.Column(db.Integer, nullable=False, default=0)
    tax_rate_bps = db.Column(db.Integer, nullable=False, default=0)  # Basis points (e.g., 1800 = 18%)

    min_stock_level = db.Column(db.Integer, nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False, default=0)

    product = db.relationship("Product", back_populates="variants")

    @property
    def stock_status(self) -> str:
        if self.quantity == 0:
            return STOCK_STATUS_OUT
        if self.quantity < self.min_stock_level:
            return STOCK_STATUS_LOW
        return STOCK_STATUS_IN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "packing_size": self.packing_size,
            "sku": self.sku,
            "barcode": self.barcode,
            "retail_price_cents": self.retail_price_cents,
            "wholesale_price_cents": self.wholesale_price_cents,
            "purchase_price_cents": self.purchase_price_cents,
            "tax_rate_bps": self.tax_rate_bps,
            "min_stock_level": self.min_stock_level,
            "quantity": self.quantity,
            "stock_status": self.stock_status,
        }


class StockMovement(db.Model):
    """
    Append-only stock ledger entry.

    balance_after is computed by the caller from its own read of the
    variant's quantity; the ledger stores it as given and never re-derives
    or verifies it. Rows are never updated or deleted.
    """
    __tablename__ = "stock_movements"
    __table_args__ = (
        db.Index("ix_stock_movements_owner_variant", "owner_id", "product_id", "variant_id"),
        db.Index("ix_stock_movements_reference", "reference_type", "reference_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("owners.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    variant_id = db.Column(db.Integer, db.ForeignKey("product_variants.id"), nullable=False)

    movement_type = db.Column(db.String(32), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    balance_after = db.Column(db.Integer, nullable=False)
    note = db.Column(db.String(255), nullable=True)

    # Document that caused the movement (e.g., "order", 42)
    reference_type = db.Column(db.String(32), nullable=True)
    reference_id = db.Column(db.Integer, nullable=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        index=True,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "user_id": self.user_id,
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "type": self.movement_type,
            "quantity": self.quantity,
            "balance_after": self.balance_after,
            "note": self.note,
            "reference_type": self.reference_type,
            "reference_id": self.reference_id,
            "created_at": to_utc_z(self.created_at),
        }
