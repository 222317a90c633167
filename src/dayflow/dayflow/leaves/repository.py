from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create_leave(
        self,
        *,
        employee_id: str,
        employee_name: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        remarks: str,
        applied_date: date,
    ) -> LeaveRequest:
        raise NotImplementedError

    def get_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_all(self) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def count_pending(self) -> int:
        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: str,
        status: LeaveStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> LeaveRequest:
        """Move a pending request to a terminal state.

        Raises NotFoundError or AlreadyDecidedError.
        """

        raise NotImplementedError
