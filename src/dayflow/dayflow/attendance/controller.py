from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import attendance_json, current_role, current_user_id, login_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance", methods=["GET"], endpoint="attendance")
    @login_required
    def attendance():
        records = container.attendance_service.list_visible(
            current_user_id=current_user_id(),
            current_role=current_role(),
        )
        return jsonify(
            {
                "success": True,
                "isAdmin": current_role() == Role.ADMIN,
                "records": [attendance_json(r) for r in records],
            }
        )

    @app.route("/attendance/checkin", methods=["POST"], endpoint="checkin")
    @login_required
    def checkin():
        record = container.attendance_service.check_in(current_user_id())
        return jsonify({"success": True, "record": attendance_json(record)})

    @app.route("/attendance/checkout", methods=["POST"], endpoint="checkout")
    @login_required
    def checkout():
        record = container.attendance_service.check_out(current_user_id())
        return jsonify({"success": True, "record": attendance_json(record)})
