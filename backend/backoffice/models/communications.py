from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import to_utc_z


NOTIFICATION_TYPES = ("order", "stock", "payment", "system")


class Notification(db.Model):
    """
    In-app notification for an owner's dashboard.

    Created unread as a side effect of order creation, payment creation and
    low-stock detection. Afterwards only is_read / is_deleted change.
    """
    __tablename__ = "notifications"
    __table_args__ = (
        db.Index("ix_notifications_owner_deleted", "owner_id", "is_deleted"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("owners.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    type = db.Column(db.String(16), nullable=False)  # order, stock, payment, system
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    link = db.Column(db.String(255), nullable=False, default="")

    is_read = db.Column(db.Boolean, nullable=False, default=False)
    is_deleted = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "user_id": self.user_id,
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "link": self.link,
            "is_read": self.is_read,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
