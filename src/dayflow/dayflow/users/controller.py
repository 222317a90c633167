from __future__ import annotations

import logging
import time
from pathlib import Path

from flask import Flask, jsonify, request, send_from_directory, session
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..common.web import (
    admin_required,
    attendance_json,
    current_role,
    current_user_id,
    employee_json,
    leave_json,
    login_required,
    request_data,
)
from ..container import Container
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

PROFILE_URL_PREFIX = "/uploads/profiles/"


def save_profile_picture(file: FileStorage, upload_dir: Path) -> str:
    """Store an uploaded picture and return the public path handed to the core."""

    filename = secure_filename(file.filename or "")
    if not filename:
        raise ValidationError("Profile picture needs a file name")

    stored_name = f"{int(time.time() * 1000)}-{filename}"
    target_dir = Path(upload_dir) / "profiles"
    target_dir.mkdir(parents=True, exist_ok=True)
    file.save(target_dir / stored_name)
    return PROFILE_URL_PREFIX + stored_name


def register(app: Flask, container: Container) -> None:
    @app.route("/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = request_data()
        employee = container.employee_service.register(
            employee_id=data.get("employeeId", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            name=data.get("name", ""),
            role=data.get("role") or None,
        )
        return jsonify({"success": True, "employee": employee_json(employee)}), 201

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "GET":
            return jsonify({"success": True, "loggedIn": "user_id" in session})

        data = request_data()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = user.employee_id
        session["name"] = user.name
        session["email"] = user.email
        session["role"] = user.role.value
        logger.info("Employee %s logged in", user.employee_id)
        return jsonify({"success": True, "user": {"id": user.employee_id, "name": user.name, "role": user.role.value}})

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/profile", methods=["GET"], endpoint="profile")
    @login_required
    def profile():
        employee = container.workflow_service.profile(current_user_id())
        return jsonify({"success": True, "profile": employee_json(employee)})

    @app.route("/profile/update", methods=["POST"], endpoint="profile_update")
    @login_required
    def profile_update():
        data = request_data()
        picture_path = None
        upload = request.files.get("profilePicture")
        if upload and upload.filename:
            picture_path = save_profile_picture(upload, container.upload_dir)

        employee = container.employee_service.update_profile(
            current_user_id=current_user_id(),
            current_role=current_role(),
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            profile_picture_path=picture_path,
        )
        session["name"] = employee.name
        return jsonify({"success": True, "profile": employee_json(employee)})

    @app.route("/uploads/<path:filename>", methods=["GET"], endpoint="uploads")
    def uploads(filename: str):
        return send_from_directory(container.upload_dir.resolve(), filename)

    @app.route("/employees", methods=["GET"], endpoint="employees")
    @admin_required
    def employees():
        roster = container.workflow_service.roster(current_role=current_role())
        return jsonify({"success": True, "employees": [employee_json(e) for e in roster]})

    @app.route("/employees/add", methods=["POST"], endpoint="employees_add")
    @admin_required
    def employees_add():
        data = request_data()
        employee = container.employee_service.add_employee(
            current_role=current_role(),
            employee_id=data.get("employeeId", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            department=data.get("department", ""),
            position=data.get("position", ""),
            salary=data.get("salary"),
        )
        return jsonify({"success": True, "employee": employee_json(employee)}), 201

    @app.route("/employees/<employee_id>", methods=["GET"], endpoint="employee_detail")
    @admin_required
    def employee_detail(employee_id: str):
        detail = container.workflow_service.employee_detail(current_role=current_role(), employee_id=employee_id)
        return jsonify(
            {
                "success": True,
                "employee": employee_json(detail.employee),
                "attendance": [attendance_json(r) for r in detail.attendance],
                "leaves": [leave_json(r) for r in detail.leaves],
            }
        )

    @app.route("/employees/<employee_id>/update", methods=["POST"], endpoint="employee_update")
    @admin_required
    def employee_update(employee_id: str):
        data = request_data()
        fields = {
            key: data[source]
            for key, source in (
                ("name", "name"),
                ("email", "email"),
                ("phone", "phone"),
                ("address", "address"),
                ("department", "department"),
                ("position", "position"),
                ("salary", "salary"),
            )
            if source in data
        }
        employee = container.employee_service.update(
            current_user_id=current_user_id(),
            current_role=current_role(),
            employee_id=employee_id,
            fields=fields,
        )
        return jsonify({"success": True, "employee": employee_json(employee)})
