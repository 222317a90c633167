from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session

from ..attendance.json_attendance_repository import attendance_to_record
from ..attendance.model import AttendanceRecord
from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AlreadyDecidedError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateIdentityError,
    NoCheckInFoundError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from ..leaves.json_leave_repository import leave_to_record
from ..leaves.model import LeaveRequest
from ..users.json_employee_repository import employee_to_record
from ..users.model import Employee

logger = logging.getLogger(__name__)

HTTP_STATUS = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    DuplicateIdentityError: 409,
    AlreadyCheckedInError: 409,
    AlreadyCheckedOutError: 409,
    NoCheckInFoundError: 409,
    AlreadyDecidedError: 409,
    StorageUnavailableError: 503,
}


def status_for(exc: DomainError) -> int:
    for cls in type(exc).__mro__:
        if cls in HTTP_STATUS:
            return HTTP_STATUS[cls]
    return 400


def error_response(exc: DomainError):
    return jsonify({"success": False, "error": exc.code, "message": str(exc)}), status_for(exc)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if isinstance(exc, StorageUnavailableError):
            logger.error("Storage unavailable: %s", exc)
        return error_response(exc)


def current_user_id() -> str:
    return str(session["user_id"])


def current_role() -> Role:
    return Role(session["role"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "login_required", "message": "Please log in"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "login_required", "message": "Please log in"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "error": "authorization_error", "message": "Access denied"}), 403
        return view(*args, **kwargs)

    return wrapper


def employee_json(employee: Employee) -> dict[str, Any]:
    data = employee_to_record(employee)
    data.pop("passwordHash", None)
    return data


def attendance_json(record: AttendanceRecord) -> dict[str, Any]:
    return attendance_to_record(record)


def leave_json(leave: LeaveRequest) -> dict[str, Any]:
    return leave_to_record(leave)


def request_data() -> dict[str, Any]:
    """Form fields or a JSON body, whichever the client sent."""

    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()
