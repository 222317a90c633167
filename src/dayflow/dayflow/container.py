from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .attendance.json_attendance_repository import JsonAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS, DEFAULT_RECENT_LIMIT
from .leaves.json_leave_repository import JsonLeaveRepository
from .leaves.service import LeaveService
from .storage.record_store import JsonRecordStore
from .users.json_employee_repository import JsonEmployeeRepository
from .users.service import AuthService, EmployeeService
from .workflow.service import WorkflowService


@dataclass(frozen=True)
class Container:
    store: JsonRecordStore
    upload_dir: Path

    employees_repo: JsonEmployeeRepository
    attendance_repo: JsonAttendanceRepository
    leaves_repo: JsonLeaveRepository

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    workflow_service: WorkflowService


def build_container(
    *,
    data_dir: str | Path,
    upload_dir: str | Path,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> Container:
    store = JsonRecordStore(data_dir, lock_timeout=lock_timeout)

    employees_repo = JsonEmployeeRepository(store)
    attendance_repo = JsonAttendanceRepository(store)
    leaves_repo = JsonLeaveRepository(store)

    auth_service = AuthService(employees_repo)
    attendance_service = AttendanceService(attendance_repo, employees_repo)
    employee_service = EmployeeService(employees_repo, attendance_service)
    leave_service = LeaveService(leaves_repo, employees_repo)
    workflow_service = WorkflowService(
        employees_repo,
        attendance_service,
        leave_service,
        recent_limit=recent_limit,
    )

    return Container(
        store=store,
        upload_dir=Path(upload_dir),
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        auth_service=auth_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        workflow_service=workflow_service,
    )
