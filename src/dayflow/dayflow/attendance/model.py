from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: str
    employee_id: str
    employee_name: str
    work_date: date
    check_in: time
    check_out: Optional[time]
    status: EmployeeStatus = EmployeeStatus.PRESENT

    @property
    def is_open(self) -> bool:
        """Checked in and not yet checked out."""
        return self.check_out is None
