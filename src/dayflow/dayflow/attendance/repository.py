from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[AttendanceRecord]:
        """Records for one employee, oldest date first."""

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        check_in: time,
    ) -> AttendanceRecord:
        """Raises AlreadyCheckedInError if a record exists for the same day."""

        raise NotImplementedError

    def update_checkout(self, *, employee_id: str, work_date: date, check_out: time) -> AttendanceRecord:
        """Raises NoCheckInFoundError or AlreadyCheckedOutError."""

        raise NotImplementedError
