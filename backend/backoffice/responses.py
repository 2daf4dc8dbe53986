# Overview: JSON response envelope shared by all API routes.

from flask import jsonify


def ok(message: str, data=None, status: int = 200):
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def fail(message: str, status: int, details: dict | None = None):
    body = {"success": False, "message": message}
    if details:
        body["details"] = details
    return jsonify(body), status


def server_error():
    return fail("Internal server error", 500)
