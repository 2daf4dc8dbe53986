# Overview: Service-layer operations for the stock ledger; append-only writer and reader.

"""
Stock Ledger Invariants (authoritative)

- Append-only: there is no update or delete API for stock movements.
- balance_after is supplied by the caller from its own read of the variant
  quantity. The ledger stores it verbatim and performs no verification.
- Movements are flushed inside the caller's transaction; the caller commits
  together with the matching stock adjustment.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import StockMovement
from ..validation import StorageError, ValidationError


MOVEMENT_PURCHASE = "purchase"
MOVEMENT_SALE = "sale"
MOVEMENT_RETURN = "return"
MOVEMENT_ADJUSTMENT = "adjustment"
MOVEMENT_DELETE_PURCHASE = "delete_purchase"
MOVEMENT_DELETE_SALE = "delete_sale"
MOVEMENT_UPDATE_PURCHASE = "update_purchase"
MOVEMENT_UPDATE_SALE = "update_sale"

MOVEMENT_TYPES = {
    MOVEMENT_PURCHASE,
    MOVEMENT_SALE,
    MOVEMENT_RETURN,
    MOVEMENT_ADJUSTMENT,
    MOVEMENT_DELETE_PURCHASE,
    MOVEMENT_DELETE_SALE,
    MOVEMENT_UPDATE_PURCHASE,
    MOVEMENT_UPDATE_SALE,
}


def append_stock_movement(
    *,
    owner_id: int,
    user_id: int,
    product_id: int,
    variant_id: int,
    movement_type: str,
    quantity: int,
    balance_after: int,
    note: str | None = None,
    reference_type: str | None = None,
    reference_id: int | None = None,
) -> StockMovement:
    """
    Append one immutable stock movement.

    - No domain logic here.
    - No deletes/updates of existing movements.
    """
    if movement_type not in MOVEMENT_TYPES:
        raise ValidationError(f"Unknown stock movement type: {movement_type}")

    movement = StockMovement(
        owner_id=owner_id,
        user_id=user_id,
        product_id=product_id,
        variant_id=variant_id,
        movement_type=movement_type,
        quantity=quantity,
        balance_after=balance_after,
        note=note,
        reference_type=reference_type,
        reference_id=reference_id,
    )
    db.session.add(movement)
    try:
        db.session.flush()  # ensures movement.id is assigned without committing
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to append {movement_type} movement for variant {variant_id}") from e
    return movement


def list_stock_movements(
    *,
    owner_id: int,
    product_id: int | None = None,
    variant_id: int | None = None,
    reference_type: str | None = None,
    reference_id: int | None = None,
    limit: int = 200,
) -> list[StockMovement]:
    """Newest first. Ties on created_at are broken by insertion order."""
    q = db.session.query(StockMovement).filter(StockMovement.owner_id == owner_id)
    if product_id is not None:
        q = q.filter(StockMovement.product_id == product_id)
    if variant_id is not None:
        q = q.filter(StockMovement.variant_id == variant_id)
    if reference_type is not None:
        q = q.filter(StockMovement.reference_type == reference_type)
    if reference_id is not None:
        q = q.filter(StockMovement.reference_id == reference_id)

    return q.order_by(
        StockMovement.created_at.desc(),
        StockMovement.id.desc(),
    ).limit(limit).all()
