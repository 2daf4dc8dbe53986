# Overview: Service-layer operations for notifications; event building, best-effort dispatch and inbox reads.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from flask import current_app

from ..extensions import db
from ..models import Notification
from ..models.communications import NOTIFICATION_TYPES
from ..validation import NotFoundError
from .products_service import VariantSnapshot


TYPE_ORDER = "order"
TYPE_STOCK = "stock"
TYPE_PAYMENT = "payment"
TYPE_SYSTEM = "system"


@dataclass(frozen=True)
class NotificationEvent:
    """A notification to be written after the workflow that produced it."""
    owner_id: int
    user_id: int
    type: str
    name: str
    description: str
    link: str = ""

    def __post_init__(self):
        if self.type not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type: {self.type}")


@dataclass
class WorkflowResult:
    """Record produced by a workflow plus the notifications it wants sent."""
    record: Any
    events: list[NotificationEvent] = field(default_factory=list)


def build_low_stock_alert(snapshot: VariantSnapshot, owner_id: int, user_id: int) -> NotificationEvent | None:
    """Return a stock alert when the variant sits below its minimum level."""
    if snapshot.quantity >= snapshot.min_stock_level:
        return None

    name = "Out of Stock Alert" if snapshot.quantity == 0 else "Low Stock Alert"
    return NotificationEvent(
        owner_id=owner_id,
        user_id=user_id,
        type=TYPE_STOCK,
        name=name,
        description=(
            f"Product {snapshot.product_name} {snapshot.packing_size} is running low on stock. "
            f"Current stock is {snapshot.quantity}."
        ),
        link="/products",
    )


def build_order_created_event(*, owner_id: int, user_id: int, order_id: int,
                              invoice_number: str, user_name: str | None) -> NotificationEvent:
    return NotificationEvent(
        owner_id=owner_id,
        user_id=user_id,
        type=TYPE_ORDER,
        name="New Sales Order Created",
        description=f"Order {invoice_number} has been placed by {user_name or 'Unknown User'}.",
        link=f"/orders/{order_id}",
    )


def format_amount(amount_cents: int) -> str:
    """Render minor units for notification text, e.g. 125000 -> '1,250.00'."""
    sign = "-" if amount_cents < 0 else ""
    whole, cents = divmod(abs(amount_cents), 100)
    return f"{sign}{whole:,}.{cents:02d}"


def build_customer_payment_event(*, owner_id: int, user_id: int, customer_id: int,
                                 customer_name: str | None, amount_cents: int) -> NotificationEvent:
    return NotificationEvent(
        owner_id=owner_id,
        user_id=user_id,
        type=TYPE_PAYMENT,
        name="Payment Received",
        description=(
            f"Payment of {format_amount(amount_cents)} has been made by "
            f"{customer_name or 'Unknown Customer'}."
        ),
        link=f"/customers/{customer_id}",
    )


def build_supplier_payment_event(*, owner_id: int, user_id: int, supplier_id: int,
                                 supplier_name: str | None, amount_cents: int) -> NotificationEvent:
    return NotificationEvent(
        owner_id=owner_id,
        user_id=user_id,
        type=TYPE_PAYMENT,
        name="Payment Outlay",
        description=(
            f"Payment outlay of {format_amount(amount_cents)} has been made for "
            f"{supplier_name or 'Unknown Supplier'}."
        ),
        link=f"/suppliers/{supplier_id}",
    )


def create_notification(event: NotificationEvent) -> Notification:
    notification = Notification(
        owner_id=event.owner_id,
        user_id=event.user_id,
        type=event.type,
        name=event.name,
        description=event.description,
        link=event.link,
    )
    db.session.add(notification)
    db.session.commit()
    return notification


def dispatch_events(events: list[NotificationEvent]) -> int:
    """
    Persist events one commit at a time.

    Best effort: a failing event is rolled back and logged, the remaining
    events are still attempted, and nothing is raised to the caller.
    Returns the number of notifications written.
    """
    written = 0
    for event in events:
        try:
            create_notification(event)
            written += 1
        except Exception:
            db.session.rollback()
            current_app.logger.exception(
                "Failed to write %s notification %r for owner %s",
                event.type,
                event.name,
                event.owner_id,
            )
    return written


def list_notifications(owner_id: int, *, unread_only: bool = False) -> list[Notification]:
    q = db.session.query(Notification).filter_by(owner_id=owner_id, is_deleted=False)
    if unread_only:
        q = q.filter_by(is_read=False)
    return q.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def _get_notification(owner_id: int, notification_id: int) -> Notification:
    notification = db.session.query(Notification).filter_by(
        id=notification_id, owner_id=owner_id, is_deleted=False
    ).first()
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


def mark_notification_read(owner_id: int, notification_id: int) -> Notification:
    notification = _get_notification(owner_id, notification_id)
    notification.is_read = True
    db.session.commit()
    return notification


def delete_notification(owner_id: int, notification_id: int) -> Notification:
    notification = _get_notification(owner_id, notification_id)
    notification.is_deleted = True
    db.session.commit()
    return notification
