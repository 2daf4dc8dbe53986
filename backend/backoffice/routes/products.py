# Overview: Flask API routes for product operations; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth
from ..responses import ok, fail, server_error
from ..services import ledger_service, products_service
from ..validation import NotFoundError, ValidationError


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products_route():
    """List products; every variant carries quantity and stock_status."""
    try:
        products = products_service.list_products(g.owner_id)
        return ok("Products fetched successfully", [p.to_dict() for p in products])
    except Exception:
        current_app.logger.exception("Failed to list products")
        return server_error()


@products_bp.post("")
@require_auth
def create_product_route():
    data = request.get_json(silent=True)
    try:
        product = products_service.create_product(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            payload=data,
        )
        return ok("Product created successfully", product.to_dict(), 201)
    except ValidationError as e:
        return fail(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return server_error()

@products_bp.get("/<int:product_id>")
@require_auth
def get_product_route(product_id: int):
    try:
        product = products_service.get_product(g.owner_id, product_id)
        return ok("Product fetched successfully", product.to_dict())
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to fetch product")
        return server_error()


@products_bp.put("/<int:product_id>")
@require_auth
def update_product_route(product_id: int):
    """
    Update product fields and variant prices, tax and minimum stock level.

    Variant quantities in the body are ignored; stock only moves through
    purchase and sales orders.
    """
    data = request.get_json(silent=True)
    try:
        product = products_service.update_product(
            owner_id=g.owner_id,
            product_id=product_id,
            payload=data,
        )
        return ok("Product updated successfully", product.to_dict())
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to update product")
        return server_error()


@products_bp.delete("/<int:product_id>")
@require_auth
def delete_product_route(product_id: int):
    try:
        products_service.delete_product(g.owner_id, product_id)
        return ok("Product deleted successfully", {"id": product_id})
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return server_error()


@products_bp.get("/<int:product_id>/variants/<int:variant_id>/movements")
@require_auth
def list_variant_movements_route(product_id: int, variant_id: int):
    """Stock ledger of one variant, newest first."""
    limit = request.args.get("limit", 200, type=int)
    if limit < 1:
        limit = 1
    if limit > 1000:
        limit = 1000

    try:
        products_service.get_variant(product_id, variant_id, owner_id=g.owner_id)
        movements = ledger_service.list_stock_movements(
            owner_id=g.owner_id,
            product_id=product_id,
            variant_id=variant_id,
            limit=limit,
        )
        return ok("Stock movements fetched successfully", [m.to_dict() for m in movements])
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to list stock movements")
        return server_error()
