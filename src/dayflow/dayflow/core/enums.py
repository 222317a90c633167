from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for access checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class EmployeeStatus(str, Enum):
    """Derived presence flag mirrored on the employee record."""

    PRESENT = "present"
    ABSENT = "absent"


class LeaveStatus(str, Enum):
    """Leave approval workflow states. APPROVED and REJECTED are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
