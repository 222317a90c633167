from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_date, require_non_empty
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import EmployeeRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave approval workflow: pending -> approved | rejected, both terminal."""

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def apply(
        self,
        *,
        current_user_id: str,
        leave_type: str,
        start_date,
        end_date,
        remarks: str = "",
        today: Optional[date] = None,
    ) -> LeaveRequest:
        employee = self._employees.get_by_id(current_user_id)
        if not employee:
            raise NotFoundError("Employee not found")

        leave_type = require_non_empty(leave_type, "Leave type")
        start = require_date(start_date, "Start date")
        end = require_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date must be on or after the start date")

        req = self._leaves.create_leave(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            remarks=(remarks or "").strip(),
            applied_date=today or now_local().date(),
        )
        logger.info("Leave %s applied by %s (%s to %s)", req.leave_id, req.employee_id, start, end)
        return req

    def decide(
        self,
        *,
        current_role: Role,
        current_user_id: str,
        leave_id: str,
        decision,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can decide leave requests")

        try:
            status = LeaveStatus(decision)
        except ValueError:
            raise ValidationError("Decision must be approved or rejected")
        if status == LeaveStatus.PENDING:
            raise ValidationError("Decision must be approved or rejected")

        req = self._leaves.decide(
            leave_id=str(leave_id),
            status=status,
            decided_by=current_user_id,
            decided_at=now or now_local(),
        )
        logger.info("Leave %s %s by %s", req.leave_id, req.status.value, current_user_id)
        return req

    def approve(self, *, current_role: Role, current_user_id: str, leave_id: str) -> LeaveRequest:
        return self.decide(
            current_role=current_role,
            current_user_id=current_user_id,
            leave_id=leave_id,
            decision=LeaveStatus.APPROVED,
        )

    def reject(self, *, current_role: Role, current_user_id: str, leave_id: str) -> LeaveRequest:
        return self.decide(
            current_role=current_role,
            current_user_id=current_user_id,
            leave_id=leave_id,
            decision=LeaveStatus.REJECTED,
        )

    def history(self, employee_id: str) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_employee(employee_id)

    def list_all(self, *, current_role: Role) -> Sequence[LeaveRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can view all leave requests")
        return self._leaves.list_all()

    def list_visible(self, *, current_user_id: str, current_role: Role) -> Sequence[LeaveRequest]:
        if current_role == Role.ADMIN:
            return self._leaves.list_all()
        return self._leaves.list_for_employee(current_user_id)

    def count_pending(self) -> int:
        return self._leaves.count_pending()
