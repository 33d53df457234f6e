"""Helpers shared by the Flask controllers: auth guards, JSON replies, error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict

import mysql.connector
from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import STAFF_ROLES, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from .errors import get_error_message

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
    (StorageError, 400),
)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "account_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        if session.get("role") not in {r.value for r in STAFF_ROLES}:
            return jsonify({"success": False, "message": "Staff access only"}), 403
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "account_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "message": "You do not have permission"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_account_id() -> int:
    return int(session["account_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def request_data() -> Dict[str, Any]:
    """JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def ok(**payload):
    return jsonify({"success": True, **payload})


def error_status(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "message": str(e)}), error_status(e)

    @app.errorhandler(mysql.connector.Error)
    def handle_database_error(e: mysql.connector.Error):
        logger.warning("Database error on %s %s: %s", request.method, request.path, e)
        status = 409 if isinstance(e, mysql.connector.IntegrityError) else 500
        return jsonify({"success": False, "message": get_error_message(e)}), status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return jsonify({"success": False, "message": f"System error: {e}"}), 500
        return jsonify({"success": False, "message": "System error, please try again"}), 500
