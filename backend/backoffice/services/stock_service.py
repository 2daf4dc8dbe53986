# Overview: Service-layer operations for stock adjustment; atomic variant quantity changes and per-line posting.

"""
Stock Adjustment Protocol

increment()/decrement() change exactly one variant's quantity with a single
atomic UPDATE ... SET quantity = quantity +/- n. There is no
read-modify-write, so concurrent workflows touching the same variant never
lose updates.

decrement() does not clamp at zero. Stock sufficiency is checked by the
order workflows before the document is persisted; the store itself accepts
whatever the workflow asks for.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from sqlalchemy import update

from ..extensions import db
from ..models import ProductVariant
from ..validation import NotFoundError, ValidationError
from .ledger_service import append_stock_movement
from .products_service import get_variant


@dataclass(frozen=True)
class LinePosting:
    """
    One line's stock effect.

    quantity is what the ledger records; delta is the signed change applied
    to the variant (positive = stock in, negative = stock out).
    """
    product_id: int
    variant_id: int
    quantity: int
    delta: int
    note: str | None = None


def _require_positive(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError("Adjustment amount must be a positive integer")


def _adjust(product_id: int, variant_id: int, delta: int) -> None:
    stmt = (
        update(ProductVariant)
        .where(
            ProductVariant.product_id == product_id,
            ProductVariant.id == variant_id,
        )
        .values(quantity=ProductVariant.quantity + delta)
        .execution_options(synchronize_session="fetch")
    )
    result = db.session.execute(stmt)
    if not result.rowcount:
        raise NotFoundError(f"Product {product_id} variant {variant_id} not found")


def increment(product_id: int, variant_id: int, amount: int) -> None:
    """Add amount to the variant's quantity. Does not commit."""
    _require_positive(amount)
    _adjust(product_id, variant_id, amount)


def decrement(product_id: int, variant_id: int, amount: int) -> None:
    """Subtract amount from the variant's quantity. Does not commit."""
    _require_positive(amount)
    _adjust(product_id, variant_id, -amount)


def post_line_movements(
    *,
    owner_id: int,
    user_id: int,
    movement_type: str,
    reference_type: str,
    reference_id: int,
    postings: list[LinePosting],
    note: str | None = None,
) -> int:
    """
    Apply line postings in array order, one commit per line.

    For each line the variant quantity is read fresh, the movement is
    appended with balance_after = current + delta, and the adjustment is
    applied. Lines already committed stay committed if a later line fails.

    Returns the number of lines posted.
    """
    posted = 0
    for posting in postings:
        try:
            snapshot = get_variant(posting.product_id, posting.variant_id)
            append_stock_movement(
                owner_id=owner_id,
                user_id=user_id,
                product_id=posting.product_id,
                variant_id=posting.variant_id,
                movement_type=movement_type,
                quantity=posting.quantity,
                balance_after=snapshot.quantity + posting.delta,
                note=posting.note if posting.note is not None else note,
                reference_type=reference_type,
                reference_id=reference_id,
            )
            if posting.delta > 0:
                increment(posting.product_id, posting.variant_id, posting.delta)
            elif posting.delta < 0:
                decrement(posting.product_id, posting.variant_id, -posting.delta)
            db.session.commit()
        except Exception:
            db.session.rollback()
            # TODO: add a compensating transaction that reverses the lines already
            # posted for this document instead of leaving it partially applied.
            current_app.logger.warning(
                "Stock posting for %s %s stopped at line %d of %d (%s); earlier lines remain applied",
                reference_type,
                reference_id,
                posted + 1,
                len(postings),
                movement_type,
            )
            raise
        posted += 1
    return posted
