from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence

from ..common.datetime_utils import format_date, parse_iso_date
from ..core.constants import EMPLOYEES
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import DuplicateIdentityError, NotFoundError
from ..storage.record_store import JsonRecordStore, Record
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# Attribute name -> persisted key for fields a caller may change.
UPDATABLE_FIELDS = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "department": "department",
    "position": "position",
    "salary": "salary",
    "profile_picture_path": "profilePicturePath",
}


def employee_to_record(employee: Employee) -> Record:
    return {
        "id": employee.employee_id,
        "email": employee.email,
        "passwordHash": employee.password_hash,
        "role": employee.role.value,
        "name": employee.name,
        "phone": employee.phone,
        "address": employee.address,
        "department": employee.department,
        "position": employee.position,
        "salary": employee.salary,
        "joinDate": format_date(employee.join_date),
        "profilePicturePath": employee.profile_picture_path,
        "status": employee.status.value,
    }


def employee_from_record(r: Record) -> Employee:
    return Employee(
        employee_id=str(r["id"]),
        email=r["email"],
        password_hash=r.get("passwordHash") or "",
        role=Role(r.get("role") or Role.EMPLOYEE.value),
        name=r.get("name") or "",
        join_date=parse_iso_date(r["joinDate"]),
        phone=r.get("phone") or "",
        address=r.get("address") or "",
        department=r.get("department") or "",
        position=r.get("position") or "",
        salary=float(r.get("salary") or 0),
        profile_picture_path=r.get("profilePicturePath"),
        status=EmployeeStatus(r.get("status") or EmployeeStatus.ABSENT.value),
    )


def _same_email(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()


class JsonEmployeeRepository(EmployeeRepository):
    def __init__(self, store: JsonRecordStore):
        self._store = store

    def _employees(self) -> Iterator[Employee]:
        """Readable accounts; a malformed row is logged and skipped."""

        for r in self._store.load(EMPLOYEES):
            try:
                yield employee_from_record(r)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed employee record %r: %s", r.get("id"), exc)

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        for employee in self._employees():
            if employee.employee_id == employee_id:
                return employee
        return None

    def get_by_email(self, email: str) -> Optional[Employee]:
        for employee in self._employees():
            if _same_email(employee.email or "", email):
                return employee
        return None

    def list_all(self) -> Sequence[Employee]:
        return list(self._employees())

    def create(self, employee: Employee) -> Employee:
        employee = dataclasses.replace(employee, status=EmployeeStatus.ABSENT)
        with self._store.locked(EMPLOYEES) as snapshot:
            clash = snapshot.find_index(
                lambda r: str(r.get("id")) == employee.employee_id or _same_email(r.get("email") or "", employee.email)
            )
            if clash is not None:
                raise DuplicateIdentityError("An account with this employee id or email already exists")
            snapshot.append(employee_to_record(employee))
        return employee

    def update(self, employee_id: str, fields: Mapping[str, Any]) -> Employee:
        ignored = sorted(set(fields) - set(UPDATABLE_FIELDS))
        if ignored:
            logger.debug("Ignoring non-updatable employee fields %s for %s", ignored, employee_id)

        with self._store.locked(EMPLOYEES) as snapshot:
            index = snapshot.find_index(lambda r: str(r.get("id")) == employee_id)
            if index is None:
                raise NotFoundError("Employee not found")

            new_email = fields.get("email")
            if new_email is not None:
                clash = snapshot.find_index(
                    lambda r: str(r.get("id")) != employee_id and _same_email(r.get("email") or "", new_email)
                )
                if clash is not None:
                    raise DuplicateIdentityError("Another account already uses this email")

            record = dict(snapshot.records[index])
            for attr, key in UPDATABLE_FIELDS.items():
                if attr in fields:
                    record[key] = fields[attr]
            snapshot.replace(index, record)
        return employee_from_record(record)

    def sync_status(self, employee_id: str, derive: Callable[[], EmployeeStatus]) -> Optional[EmployeeStatus]:
        with self._store.locked(EMPLOYEES) as snapshot:
            index = snapshot.find_index(lambda r: str(r.get("id")) == employee_id)
            if index is None:
                return None
            # Derived under the lock so the last writer always sees the latest ledger.
            status = derive()
            record = snapshot.records[index]
            if record.get("status") != status.value:
                snapshot.replace(index, {**record, "status": status.value})
        return status
