# Overview: Flask API routes for sales order operations; parses input and returns JSON responses.

"""
Sales Order Routes

All routes require authentication and are scoped to the session's owner.
Creating, updating and deleting an order moves stock; notifications raised
by the workflow are written after it returns and never fail the request.
"""

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth
from ..responses import ok, fail, server_error
from ..services import sales_service, notification_service
from ..validation import InsufficientStockError, NotFoundError, ValidationError


orders_bp = Blueprint("orders", __name__, url_prefix="/api/order")


@orders_bp.get("")
@require_auth
def list_orders_route():
    try:
        orders = sales_service.list_orders(g.owner_id)
        return ok("Orders fetched successfully", [o.to_dict() for o in orders])
    except Exception:
        current_app.logger.exception("Failed to list orders")
        return server_error()


@orders_bp.post("")
@require_auth
def create_order_route():
    """
    Create a sales order.

    Request body: customer_id, payment_method, payment_status, totals in
    cents and a non-empty `products` array. At most one payment reference
    (card_number, upi_transaction_id, cheque_number, gateway_transaction_id,
    bank_reference_number) may be supplied.
    """
    data = request.get_json(silent=True)
    try:
        result = sales_service.create_order(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            payload=data,
        )
        notification_service.dispatch_events(result.events)
        return ok("Order created successfully", result.record.to_dict(), 201)
    except InsufficientStockError as e:
        return fail(str(e), 400, e.details)
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to create order")
        return server_error()


@orders_bp.get("/<int:order_id>")
@require_auth
def get_order_route(order_id: int):
    try:
        order = sales_service.get_order(g.owner_id, order_id)
        return ok("Order fetched successfully", order.to_dict())
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to fetch order")
        return server_error()


@orders_bp.get("/customer/<int:customer_id>")
@require_auth
def list_customer_orders_route(customer_id: int):
    try:
        orders = sales_service.list_orders_by_customer(g.owner_id, customer_id)
        return ok("Orders fetched successfully", [o.to_dict() for o in orders])
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to list customer orders")
        return server_error()


@orders_bp.put("/<int:order_id>")
@require_auth
def update_order_route(order_id: int):
    data = request.get_json(silent=True)
    try:
        result = sales_service.update_order(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            order_id=order_id,
            payload=data,
        )
        notification_service.dispatch_events(result.events)
        return ok("Order updated successfully", result.record.to_dict())
    except InsufficientStockError as e:
        return fail(str(e), 400, e.details)
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to update order")
        return server_error()


@orders_bp.delete("/<int:order_id>")
@require_auth
def delete_order_route(order_id: int):
    try:
        result = sales_service.delete_order(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            order_id=order_id,
        )
        notification_service.dispatch_events(result.events)
        return ok("Order deleted successfully", {"id": result.record.id})
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to delete order")
        return server_error()
