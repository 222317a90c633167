from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_role, current_user_id, leave_json, login_required, request_data
from ..container import Container
from ..core.enums import LeaveStatus, Role


def register(app: Flask, container: Container) -> None:
    @app.route("/leaves", methods=["GET"], endpoint="leaves")
    @login_required
    def leaves():
        records = container.leave_service.list_visible(
            current_user_id=current_user_id(),
            current_role=current_role(),
        )
        return jsonify(
            {
                "success": True,
                "isAdmin": current_role() == Role.ADMIN,
                "records": [leave_json(r) for r in records],
            }
        )

    @app.route("/leaves/apply", methods=["POST"], endpoint="leaves_apply")
    @login_required
    def leaves_apply():
        data = request_data()
        leave = container.leave_service.apply(
            current_user_id=current_user_id(),
            leave_type=data.get("leaveType", ""),
            start_date=data.get("startDate", ""),
            end_date=data.get("endDate", ""),
            remarks=data.get("remarks", ""),
        )
        return jsonify({"success": True, "leave": leave_json(leave)}), 201

    def _decide(leave_id: str, decision: LeaveStatus):
        leave = container.leave_service.decide(
            current_role=current_role(),
            current_user_id=current_user_id(),
            leave_id=leave_id,
            decision=decision,
        )
        return jsonify({"success": True, "leave": leave_json(leave)})

    @app.route("/leaves/approve/<leave_id>", methods=["POST"], endpoint="leaves_approve")
    @admin_required
    def leaves_approve(leave_id: str):
        return _decide(leave_id, LeaveStatus.APPROVED)

    @app.route("/leaves/reject/<leave_id>", methods=["POST"], endpoint="leaves_reject")
    @admin_required
    def leaves_reject(leave_id: str):
        return _decide(leave_id, LeaveStatus.REJECTED)
