# Overview: Flask API routes for purchase order operations; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth
from ..responses import ok, fail, server_error
from ..services import purchase_service
from ..validation import InsufficientStockError, NotFoundError, ValidationError


purchase_orders_bp = Blueprint("purchase_orders", __name__, url_prefix="/api/purchase-order")


@purchase_orders_bp.get("")
@require_auth
def list_purchase_orders_route():
    try:
        orders = purchase_service.list_purchase_orders(g.owner_id)
        return ok("Purchase orders fetched successfully", [o.to_dict() for o in orders])
    except Exception:
        current_app.logger.exception("Failed to list purchase orders")
        return server_error()


@purchase_orders_bp.post("")
@require_auth
def create_purchase_order_route():
    data = request.get_json(silent=True)
    try:
        result = purchase_service.create_purchase_order(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            payload=data,
        )
        return ok("Purchase order created successfully", result.record.to_dict(), 201)
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to create purchase order")
        return server_error()


@purchase_orders_bp.get("/<int:purchase_order_id>")
@require_auth
def get_purchase_order_route(purchase_order_id: int):
    try:
        order = purchase_service.get_purchase_order(g.owner_id, purchase_order_id)
        return ok("Purchase order fetched successfully", order.to_dict())
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to fetch purchase order")
        return server_error()


@purchase_orders_bp.get("/supplier/<int:supplier_id>")
@require_auth
def list_supplier_purchase_orders_route(supplier_id: int):
    try:
        orders = purchase_service.list_purchase_orders_by_supplier(g.owner_id, supplier_id)
        return ok("Purchase orders fetched successfully", [o.to_dict() for o in orders])
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to list supplier purchase orders")
        return server_error()


@purchase_orders_bp.put("/<int:purchase_order_id>")
@require_auth
def update_purchase_order_route(purchase_order_id: int):
    data = request.get_json(silent=True)
    try:
        result = purchase_service.update_purchase_order(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            purchase_order_id=purchase_order_id,
            payload=data,
        )
        return ok("Purchase order updated successfully", result.record.to_dict())
    except InsufficientStockError as e:
        return fail(str(e), 400, e.details)
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to update purchase order")
        return server_error()


@purchase_orders_bp.delete("/<int:purchase_order_id>")
@require_auth
def delete_purchase_order_route(purchase_order_id: int):
    try:
        result = purchase_service.delete_purchase_order(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            purchase_order_id=purchase_order_id,
        )
        return ok("Purchase order deleted successfully", {"id": result.record.id})
    except InsufficientStockError as e:
        return fail(str(e), 400, e.details)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to delete purchase order")
        return server_error()
