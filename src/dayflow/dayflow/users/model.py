from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import EmployeeStatus, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee or admin account.

    Note: ``status`` is a mirror of today's attendance; read paths recompute it.
    """

    employee_id: str
    email: str
    password_hash: str
    role: Role
    name: str
    join_date: date
    phone: str = ""
    address: str = ""
    department: str = ""
    position: str = ""
    salary: float = 0.0
    profile_picture_path: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.ABSENT
