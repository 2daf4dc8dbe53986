# Overview: Flask API routes for notification operations; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth
from ..responses import ok, fail, server_error
from ..services import notification_service
from ..validation import NotFoundError


notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.get("")
@require_auth
def list_notifications_route():
    unread_only = request.args.get("unread", "false").lower() == "true"
    try:
        notifications = notification_service.list_notifications(g.owner_id, unread_only=unread_only)
        return ok("Notifications fetched successfully", [n.to_dict() for n in notifications])
    except Exception:
        current_app.logger.exception("Failed to list notifications")
        return server_error()


@notifications_bp.put("/<int:notification_id>")
@require_auth
def mark_notification_read_route(notification_id: int):
    try:
        notification = notification_service.mark_notification_read(g.owner_id, notification_id)
        return ok("Notification marked as read", notification.to_dict())
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to update notification")
        return server_error()


@notifications_bp.delete("/<int:notification_id>")
@require_auth
def delete_notification_route(notification_id: int):
    try:
        notification_service.delete_notification(g.owner_id, notification_id)
        return ok("Notification deleted successfully", {"id": notification_id})
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to delete notification")
        return server_error()
