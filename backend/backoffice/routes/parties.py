# Overview: Flask API routes for customer and supplier operations; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth
from ..responses import ok, fail, server_error
from ..services import customer_service, supplier_service
from ..validation import NotFoundError, ValidationError


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")
suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api/suppliers")


# =============================================================================
# CUSTOMERS
# =============================================================================

@customers_bp.get("")
@require_auth
def list_customers_route():
    try:
        customers = customer_service.list_customers(g.owner_id)
        return ok("Customers fetched successfully", [c.to_dict() for c in customers])
    except Exception:
        current_app.logger.exception("Failed to list customers")
        return server_error()


@customers_bp.post("")
@require_auth
def create_customer_route():
    data = request.get_json(silent=True)
    try:
        customer = customer_service.create_customer(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            payload=data,
        )
        return ok("Customer created successfully", customer.to_dict(), 201)
    except ValidationError as e:
        return fail(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to create customer")
        return server_error()


@customers_bp.get("/<int:customer_id>")
@require_auth
def get_customer_route(customer_id: int):
    try:
        customer = customer_service.get_customer(g.owner_id, customer_id)
        return ok("Customer fetched successfully", customer.to_dict())
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to fetch customer")
        return server_error()


@customers_bp.put("/<int:customer_id>")
@require_auth
def update_customer_route(customer_id: int):
    data = request.get_json(silent=True)
    try:
        customer = customer_service.update_customer(g.owner_id, customer_id, data)
        return ok("Customer updated successfully", customer.to_dict())
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to update customer")
        return server_error()


@customers_bp.delete("/<int:customer_id>")
@require_auth
def delete_customer_route(customer_id: int):
    try:
        customer_service.delete_customer(g.owner_id, customer_id)
        return ok("Customer deleted successfully", {"id": customer_id})
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to delete customer")
        return server_error()


# =============================================================================
# SUPPLIERS
# =============================================================================

@suppliers_bp.get("")
@require_auth
def list_suppliers_route():
    try:
        suppliers = supplier_service.list_suppliers(g.owner_id)
        return ok("Suppliers fetched successfully", [s.to_dict() for s in suppliers])
    except Exception:
        current_app.logger.exception("Failed to list suppliers")
        return server_error()


@suppliers_bp.post("")
@require_auth
def create_supplier_route():
    data = request.get_json(silent=True)
    try:
        supplier = supplier_service.create_supplier(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            payload=data,
        )
        return ok("Supplier created successfully", supplier.to_dict(), 201)
    except ValidationError as e:
        return fail(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to create supplier")
        return server_error()


@suppliers_bp.get("/<int:supplier_id>")
@require_auth
def get_supplier_route(supplier_id: int):
    try:
        supplier = supplier_service.get_supplier(g.owner_id, supplier_id)
        return ok("Supplier fetched successfully", supplier.to_dict())
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to fetch supplier")
        return server_error()


@suppliers_bp.put("/<int:supplier_id>")
@require_auth
def update_supplier_route(supplier_id: int):
    data = request.get_json(silent=True)
    try:
        supplier = supplier_service.update_supplier(g.owner_id, supplier_id, data)
        return ok("Supplier updated successfully", supplier.to_dict())
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to update supplier")
        return server_error()


@suppliers_bp.delete("/<int:supplier_id>")
@require_auth
def delete_supplier_route(supplier_id: int):
    try:
        supplier_service.delete_supplier(g.owner_id, supplier_id)
        return ok("Supplier deleted successfully", {"id": supplier_id})
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to delete supplier")
        return server_error()
