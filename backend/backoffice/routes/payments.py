# Overview: Flask API routes for customer and supplier payments; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth
from ..responses import ok, fail, server_error
from ..services import notification_service, payment_service
from ..validation import NotFoundError, ValidationError


customer_payments_bp = Blueprint("customer_payments", __name__, url_prefix="/api/customer-payments")
supplier_payments_bp = Blueprint("supplier_payments", __name__, url_prefix="/api/supplier-payments")


@customer_payments_bp.get("")
@require_auth
def list_customer_payments_route():
    customer_id = request.args.get("customer_id", type=int)
    try:
        payments = payment_service.list_customer_payments(g.owner_id, customer_id)
        return ok("Customer payments fetched successfully", [p.to_dict() for p in payments])
    except Exception:
        current_app.logger.exception("Failed to list customer payments")
        return server_error()


@customer_payments_bp.post("")
@require_auth
def create_customer_payment_route():
    data = request.get_json(silent=True)
    try:
        result = payment_service.create_customer_payment(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            payload=data,
        )
        notification_service.dispatch_events(result.events)
        return ok("Customer payment created successfully", result.record.to_dict(), 201)
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to create customer payment")
        return server_error()


@customer_payments_bp.put("/<int:payment_id>")
@require_auth
def update_customer_payment_route(payment_id: int):
    data = request.get_json(silent=True)
    try:
        payment = payment_service.update_customer_payment(g.owner_id, payment_id, data)
        return ok("Customer payment updated successfully", payment.to_dict())
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to update customer payment")
        return server_error()


@customer_payments_bp.delete("/<int:payment_id>")
@require_auth
def delete_customer_payment_route(payment_id: int):
    try:
        payment_service.delete_customer_payment(g.owner_id, payment_id)
        return ok("Customer payment deleted successfully", {"id": payment_id})
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to delete customer payment")
        return server_error()


@supplier_payments_bp.get("")
@require_auth
def list_supplier_payments_route():
    supplier_id = request.args.get("supplier_id", type=int)
    try:
        payments = payment_service.list_supplier_payments(g.owner_id, supplier_id)
        return ok("Supplier payments fetched successfully", [p.to_dict() for p in payments])
    except Exception:
        current_app.logger.exception("Failed to list supplier payments")
        return server_error()


@supplier_payments_bp.post("")
@require_auth
def create_supplier_payment_route():
    data = request.get_json(silent=True)
    try:
        result = payment_service.create_supplier_payment(
            owner_id=g.owner_id,
            user_id=g.current_user.id,
            payload=data,
        )
        notification_service.dispatch_events(result.events)
        return ok("Supplier payment created successfully", result.record.to_dict(), 201)
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to create supplier payment")
        return server_error()


@supplier_payments_bp.put("/<int:payment_id>")
@require_auth
def update_supplier_payment_route(payment_id: int):
    data = request.get_json(silent=True)
    try:
        payment = payment_service.update_supplier_payment(g.owner_id, payment_id, data)
        return ok("Supplier payment updated successfully", payment.to_dict())
    except ValidationError as e:
        return fail(str(e), 400)
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to update supplier payment")
        return server_error()


@supplier_payments_bp.delete("/<int:payment_id>")
@require_auth
def delete_supplier_payment_route(payment_id: int):
    try:
        payment_service.delete_supplier_payment(g.owner_id, payment_id)
        return ok("Supplier payment deleted successfully", {"id": payment_id})
    except NotFoundError as e:
        return fail(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to delete supplier payment")
        return server_error()
