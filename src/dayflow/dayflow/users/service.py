from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..common.validators import parse_salary, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# Fields an employee may change on their own profile.
PROFILE_FIELDS = frozenset({"name", "phone", "address", "profile_picture_path"})
ADMIN_FIELDS = frozenset({"name", "email", "phone", "address", "department", "position", "salary", "profile_picture_path"})


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    employee_id: str
    name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        employee = self._employees.get_by_email((email or "").strip())
        if not employee:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. an empty or malformed stored hash
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser(
            employee_id=employee.employee_id,
            name=employee.name,
            email=employee.email,
            role=employee.role,
        )


class EmployeeService:
    """Use case: employee accounts (signup, admin management, profile edits).

    Accounts handed back to callers carry the status derived from today's
    attendance, not the stored mirror.
    """

    def __init__(self, employees: EmployeeRepository, attendance: AttendanceService):
        self._employees = employees
        self._attendance = attendance

    @staticmethod
    def _with_status(employee: Employee, status: EmployeeStatus) -> Employee:
        if employee.status == status:
            return employee
        return dataclasses.replace(employee, status=status)

    def _create(
        self,
        *,
        employee_id: str,
        email: str,
        password: str,
        name: str,
        role: Role,
        join_date: Optional[date],
        phone: str = "",
        address: str = "",
        department: str = "",
        position: str = "",
        salary: Any = 0,
    ) -> Employee:
        employee_id = require_non_empty(employee_id, "Employee ID")
        email = require_email(email)
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        employee = Employee(
            employee_id=employee_id,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            name=name,
            join_date=join_date or now_local().date(),
            phone=(phone or "").strip(),
            address=(address or "").strip(),
            department=(department or "").strip(),
            position=(position or "").strip(),
            salary=parse_salary(salary),
        )
        created = self._employees.create(employee)
        logger.info("Created %s account %s", created.role.value, created.employee_id)
        return created

    def register(
        self,
        *,
        employee_id: str,
        email: str,
        password: str,
        name: str,
        role: Optional[str] = None,
        join_date: Optional[date] = None,
    ) -> Employee:
        """Self-service signup; the role defaults to employee."""

        try:
            parsed_role = Role(role) if role else Role.EMPLOYEE
        except ValueError:
            raise ValidationError("Unknown role")

        return self._create(
            employee_id=employee_id,
            email=email,
            password=password,
            name=name,
            role=parsed_role,
            join_date=join_date,
        )

    def add_employee(
        self,
        *,
        current_role: Role,
        employee_id: str,
        email: str,
        password: str,
        name: str,
        phone: str = "",
        department: str = "",
        position: str = "",
        salary: Any = 0,
        join_date: Optional[date] = None,
    ) -> Employee:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can add employees")

        return self._create(
            employee_id=employee_id,
            email=email,
            password=password,
            name=name,
            role=Role.EMPLOYEE,
            join_date=join_date,
            phone=phone,
            department=department,
            position=position,
            salary=salary,
        )

    def get(self, employee_id: str, *, today: Optional[date] = None) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return self._with_status(employee, self._attendance.status_for(employee_id, today or now_local().date()))

    def list_all(self, *, current_role: Role, today: Optional[date] = None) -> Sequence[Employee]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can list employees")
        open_ids = self._attendance.open_employee_ids(today or now_local().date())
        return [
            self._with_status(e, EmployeeStatus.PRESENT if e.employee_id in open_ids else EmployeeStatus.ABSENT)
            for e in self._employees.list_all()
        ]

    def update(
        self,
        *,
        current_user_id: str,
        current_role: Role,
        employee_id: str,
        fields: Mapping[str, Any],
        today: Optional[date] = None,
    ) -> Employee:
        """Merge ``fields`` into an account.

        Employees may only touch their own profile fields; ``status`` is never
        taken from the caller.
        """

        if current_role != Role.ADMIN:
            if employee_id != current_user_id:
                raise AuthorizationError("You can only update your own profile")
            forbidden = (set(fields) & ADMIN_FIELDS) - PROFILE_FIELDS
            if forbidden:
                raise AuthorizationError(f"Not allowed to change: {', '.join(sorted(forbidden))}")

        updated = self._employees.update(employee_id, self._clean(fields))
        return self._with_status(updated, self._attendance.status_for(employee_id, today or now_local().date()))

    def update_profile(
        self,
        *,
        current_user_id: str,
        current_role: Role,
        name: str = "",
        phone: str = "",
        address: str = "",
        profile_picture_path: Optional[str] = None,
    ) -> Employee:
        """Self-service edit: blank values keep what is stored."""

        fields: dict[str, Any] = {}
        for key, value in (("name", name), ("phone", phone), ("address", address)):
            if value and value.strip():
                fields[key] = value
        if profile_picture_path:
            fields["profile_picture_path"] = profile_picture_path

        return self.update(
            current_user_id=current_user_id,
            current_role=current_role,
            employee_id=current_user_id,
            fields=fields,
        )

    @staticmethod
    def _clean(fields: Mapping[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in fields.items():
            if key == "name":
                cleaned[key] = require_non_empty(value, "Name")
            elif key == "email":
                cleaned[key] = require_email(value)
            elif key == "salary":
                cleaned[key] = parse_salary(value)
            elif key == "profile_picture_path":
                cleaned[key] = value or None
            elif isinstance(value, str):
                cleaned[key] = value.strip()
            else:
                cleaned[key] = value
        return cleaned
