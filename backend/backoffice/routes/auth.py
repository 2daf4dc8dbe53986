# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

Login exchanges credentials for a bearer token; every other API route
expects it in the Authorization header. Users are created through the CLI
(`flask users create`), there is no self-registration.
"""

from flask import Blueprint, request, current_app

from ..decorators import bearer_token
from ..responses import ok, fail, server_error
from ..services import auth_service
from ..services import session_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Request body: {"username": "...", "password": "...", "owner_code": "..."}
    owner_code is optional when the username is unique across owners.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username") or data.get("email")
    password = data.get("password")

    if not all([username, password]):
        return fail("username/email and password required", 400)

    try:
        user = auth_service.authenticate(username, password, owner_code=data.get("owner_code"))
        if not user:
            return fail("Invalid credentials", 401)

        session, token = session_service.create_session(
            user.id,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )

        return ok("Login successful", {
            "user": user.to_dict(),
            "owner_id": session.owner_id,
            "token": token,
        })
    except Exception:
        current_app.logger.exception("Failed to login user")
        return server_error()


@auth_bp.post("/logout")
def logout_route():
    token = bearer_token()
    if not token:
        return fail("Authentication required", 401)

    try:
        if not session_service.revoke_session(token):
            return fail("Invalid or expired token", 401)
        return ok("Logout successful")
    except Exception:
        current_app.logger.exception("Failed to logout user")
        return server_error()
