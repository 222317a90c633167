from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_RECENT_LIMIT
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..leaves.model import LeaveRequest
from ..leaves.service import LeaveService
from ..users.model import Employee
from ..users.repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeDashboard:
    profile: Employee
    recent_attendance: Sequence[AttendanceRecord]
    recent_leaves: Sequence[LeaveRequest]


@dataclass(frozen=True)
class AdminDashboard:
    employees: Sequence[Employee]
    pending_leaves: int


@dataclass(frozen=True)
class EmployeeDetail:
    employee: Employee
    attendance: Sequence[AttendanceRecord]
    leaves: Sequence[LeaveRequest]


class WorkflowService:
    """Read models spanning employees, attendance and leaves.

    Employee.status is recomputed from today's attendance on every read, so a
    stored ``present`` from a previous day never leaks out.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceService,
        leaves: LeaveService,
        *,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._recent_limit = int(recent_limit)

    def _with_status(self, employee: Employee, open_ids: set[str]) -> Employee:
        status = EmployeeStatus.PRESENT if employee.employee_id in open_ids else EmployeeStatus.ABSENT
        if employee.status == status:
            return employee
        return dataclasses.replace(employee, status=status)

    def current_status(self, employee_id: str, *, today: Optional[date] = None) -> EmployeeStatus:
        return self._attendance.status_for(employee_id, today or now_local().date())

    def profile(self, employee_id: str, *, today: Optional[date] = None) -> Employee:
        today = today or now_local().date()
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return self._with_status(employee, self._attendance.open_employee_ids(today))

    def roster(self, *, current_role: Role, today: Optional[date] = None, employees_only: bool = False) -> Sequence[Employee]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can view the roster")

        today = today or now_local().date()
        open_ids = self._attendance.open_employee_ids(today)
        return [
            self._with_status(e, open_ids)
            for e in self._employees.list_all()
            if not employees_only or e.role == Role.EMPLOYEE
        ]

    def employee_dashboard(self, employee_id: str, *, today: Optional[date] = None) -> EmployeeDashboard:
        profile = self.profile(employee_id, today=today)
        limit = self._recent_limit
        return EmployeeDashboard(
            profile=profile,
            recent_attendance=list(self._attendance.history(employee_id))[-limit:],
            recent_leaves=list(self._leaves.history(employee_id))[-limit:],
        )

    def admin_dashboard(self, *, current_role: Role, today: Optional[date] = None) -> AdminDashboard:
        return AdminDashboard(
            employees=self.roster(current_role=current_role, today=today, employees_only=True),
            pending_leaves=self._leaves.count_pending(),
        )

    def employee_detail(self, *, current_role: Role, employee_id: str, today: Optional[date] = None) -> EmployeeDetail:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can view employee details")

        return EmployeeDetail(
            employee=self.profile(employee_id, today=today),
            attendance=self._attendance.history(employee_id),
            leaves=self._leaves.history(employee_id),
        )

    def reconcile_statuses(self, *, today: Optional[date] = None) -> int:
        """Rewrite the stored status mirror from today's attendance.

        Returns the number of employees whose stored status changed.
        """

        today = today or now_local().date()
        open_ids = self._attendance.open_employee_ids(today)
        changed = 0
        for employee in self._employees.list_all():
            expected = self._with_status(employee, open_ids).status
            if employee.status != expected:
                if self._attendance.sync_status(employee.employee_id, today) != employee.status:
                    changed += 1
        if changed:
            logger.info("Reconciled status of %d employee(s) for %s", changed, today)
        return changed
