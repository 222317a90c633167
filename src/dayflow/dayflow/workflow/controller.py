from __future__ import annotations

from flask import Flask, jsonify, redirect, session, url_for

from ..common.web import attendance_json, current_role, current_user_id, employee_json, leave_json, login_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    def index():
        if "user_id" in session:
            return redirect(url_for("dashboard"))
        return redirect(url_for("login"))

    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        if current_role() == Role.ADMIN:
            admin = container.workflow_service.admin_dashboard(current_role=current_role())
            return jsonify(
                {
                    "success": True,
                    "view": "admin",
                    "employees": [employee_json(e) for e in admin.employees],
                    "pendingLeaves": admin.pending_leaves,
                }
            )

        board = container.workflow_service.employee_dashboard(current_user_id())
        return jsonify(
            {
                "success": True,
                "view": "employee",
                "profile": employee_json(board.profile),
                "recentAttendance": [attendance_json(r) for r in board.recent_attendance],
                "recentLeaves": [leave_json(r) for r in board.recent_leaves],
            }
        )
