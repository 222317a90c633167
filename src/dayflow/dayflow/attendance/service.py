from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, StorageUnavailableError
from ..common.datetime_utils import now_local
from ..users.repository import EmployeeRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in/check-out state machine per employee and day.

    The attendance record is canonical. The employee status mirror is rederived
    from the ledger afterwards in its own critical section, so mirror writes
    that land out of order still agree with the ledger. If that write fails the
    record stands and the mirror is left for reconciliation.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def check_in(self, employee_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        record = self._attendance.create_checkin(
            employee_id=employee_id,
            employee_name=employee.name,
            work_date=now.date(),
            check_in=now.time().replace(microsecond=0),
        )
        logger.info("Employee %s checked in on %s", employee_id, record.work_date)

        self._mirror_status(employee_id, record.work_date)
        return record

    def check_out(self, employee_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()

        record = self._attendance.update_checkout(
            employee_id=employee_id,
            work_date=now.date(),
            check_out=now.time().replace(microsecond=0),
        )
        logger.info("Employee %s checked out on %s", employee_id, record.work_date)

        self._mirror_status(employee_id, record.work_date)
        return record

    def status_for(self, employee_id: str, today: date) -> EmployeeStatus:
        """Present while today's record is checked in but not yet out."""

        record = self._attendance.get_for_employee_and_date(employee_id, today)
        return EmployeeStatus.PRESENT if record and record.is_open else EmployeeStatus.ABSENT

    def sync_status(self, employee_id: str, today: date) -> Optional[EmployeeStatus]:
        """Rewrite the stored status mirror from the ledger as it stands for ``today``."""

        return self._employees.sync_status(employee_id, lambda: self.status_for(employee_id, today))

    def _mirror_status(self, employee_id: str, today: date) -> None:
        try:
            if self.sync_status(employee_id, today) is None:
                logger.warning("Status mirror skipped, employee %s no longer exists", employee_id)
        except StorageUnavailableError as exc:
            logger.warning("Status mirror for %s left stale (%s); reconciliation will repair it", employee_id, exc)

    def history(self, employee_id: str) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_employee(employee_id)

    def list_all(self, *, current_role: Role) -> Sequence[AttendanceRecord]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can view all attendance")
        return self._attendance.list_all()

    def list_visible(self, *, current_user_id: str, current_role: Role) -> Sequence[AttendanceRecord]:
        """Everything for admins, own records for employees."""

        if current_role == Role.ADMIN:
            return self._attendance.list_all()
        return self._attendance.list_for_employee(current_user_id)

    def open_employee_ids(self, today: date) -> set[str]:
        return {rec.employee_id for rec in self._attendance.list_for_date(today) if rec.is_open}
