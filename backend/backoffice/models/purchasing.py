from __future__ import annotations

from ..extensions import db
from backoffice.payment_details import PaymentDetail
from backoffice.time_utils import to_utc_z


class PurchaseOrder(db.Model):
    """
    Purchase order document (incoming stock from a supplier).

    Soft-deleted only (is_deleted) so stock movements keep pointing at a
    real document. Line prices are frozen copies taken at order time.
    """
    __tablename__ = "purchase_orders"
    __table_args__ = (
        db.UniqueConstraint("invoice_number", name="uq_purchase_orders_invoice_number"),
        db.Index("ix_purchase_orders_owner_deleted_created", "owner_id", "is_deleted", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("owners.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    supplier_id = db.Column(db.Integer, db.ForeignKey("suppliers.id"), nullable=False, index=True)

    # Totals (all amounts in cents)
    sub_total_cents = db.Column(db.Integer, nullable=False)
    total_gst_cents = db.Column(db.Integer, nullable=False)
    round_off_cents = db.Column(db.Integer, nullable=False, default=0)
    total_cents = db.Column(db.Integer, nullable=False)

    payment_method = db.Column(db.String(32), nullable=True)
    # Tagged union: kind is one of payment_details.VALID_KINDS, or NULL for none
    payment_detail_kind = db.Column(db.String(16), nullable=True)
    payment_detail_reference = db.Column(db.String(128), nullable=True)
    payment_status = db.Column(db.String(32), nullable=False)

    invoice_number = db.Column(db.String(64), nullable=False)
    notes = db.Column(db.Text, nullable=True)

    is_deleted = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())
    version_id = db.Column(db.Integer, nullable=False, default=1)

    lines = db.relationship(
        "PurchaseOrderLine",
        back_populates="purchase_order",
        order_by="PurchaseOrderLine.position",
        cascade="all, delete-orphan",
        lazy=True,
    )
    supplier = db.relationship("Supplier")
    user = db.relationship("User")
    __mapper_args__ = {"version_id_col": version_id}

    @property
    def payment_detail(self) -> PaymentDetail | None:
        return PaymentDetail.from_columns(self.payment_detail_kind, self.payment_detail_reference)

    @payment_detail.setter
    def payment_detail(self, detail: PaymentDetail | None) -> None:
        self.payment_detail_kind = detail.kind if detail else None
        self.payment_detail_reference = detail.reference if detail else None

    def to_dict(self) -> dict:
        detail = self.payment_detail
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "user_id": self.user_id,
            "supplier_id": self.supplier_id,
            "supplier_name": self.supplier.name if self.supplier else None,
            "sub_total_cents": self.sub_total_cents,
            "total_gst_cents": self.total_gst_cents,
            "round_off_cents": self.round_off_cents,
            "total_cents": self.total_cents,
            "payment_method": self.payment_method,
            "payment_detail": detail.to_dict() if detail else None,
            "payment_status": self.payment_status,
            "invoice_number": self.invoice_number,
            "notes": self.notes,
            "is_deleted": self.is_deleted,
            "products": [line.to_dict() for line in self.lines],
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
            "version_id": self.version_id,
        }


class PurchaseOrderLine(db.Model):
    """Line item embedded in a purchase order; has no lifecycle of its own."""
    __tablename__ = "purchase_order_lines"
    __table_args__ = (
        db.UniqueConstraint("purchase_order_id", "product_id", "variant_id", name="uq_purchase_order_lines_order_variant"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    purchase_order_id = db.Column(db.Integer, db.ForeignKey("purchase_orders.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    variant_id = db.Column(db.Integer, db.ForeignKey("product_variants.id"), nullable=False)

    unit = db.Column(db.Integer, nullable=False)
    carton = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    # Frozen at order time
    mrp_cents = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    gst_rate_bps = db.Column(db.Integer, nullable=False)
    gst_amount_cents = db.Column(db.Integer, nullable=False)
    line_total_cents = db.Column(db.Integer, nullable=False)

    purchase_order = db.relationship("PurchaseOrder", back_populates="lines")
    variant = db.relationship("ProductVariant")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "purchase_order_id": self.purchase_order_id,
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "product_name": self.variant.product.name if self.variant else None,
            "packing_size": self.variant.packing_size if self.variant else None,
            "unit": self.unit,
            "carton": self.carton,
            "quantity": self.quantity,
            "mrp_cents": self.mrp_cents,
            "unit_price_cents": self.unit_price_cents,
            "gst_rate_bps": self.gst_rate_bps,
            "gst_amount_cents": self.gst_amount_cents,
            "line_total_cents": self.line_total_cents,
        }
