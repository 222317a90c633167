from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: str
    employee_id: str
    employee_name: str
    leave_type: str
    start_date: date
    end_date: date
    remarks: str
    status: LeaveStatus
    applied_date: date
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
