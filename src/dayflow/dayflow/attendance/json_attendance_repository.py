from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..common.datetime_utils import format_date, format_time, parse_iso_date, parse_time
from ..core.constants import ATTENDANCE
from ..core.enums import EmployeeStatus
from ..core.exceptions import AlreadyCheckedInError, AlreadyCheckedOutError, NoCheckInFoundError
from ..storage.record_store import JsonRecordStore, Record, next_record_id
from .model import AttendanceRecord
from .repository import AttendanceRepository


def attendance_to_record(rec: AttendanceRecord) -> Record:
    return {
        "id": rec.attendance_id,
        "employeeId": rec.employee_id,
        "employeeName": rec.employee_name,
        "date": format_date(rec.work_date),
        "checkIn": format_time(rec.check_in),
        "checkOut": format_time(rec.check_out),
        "status": rec.status.value,
    }


def attendance_from_record(r: Record) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(r["id"]),
        employee_id=str(r["employeeId"]),
        employee_name=r.get("employeeName") or "",
        work_date=parse_iso_date(r["date"]),
        check_in=parse_time(r["checkIn"]),
        check_out=parse_time(r["checkOut"]) if r.get("checkOut") else None,
        status=EmployeeStatus(r.get("status") or EmployeeStatus.PRESENT.value),
    )


def _matches(r: Record, employee_id: str, work_date: date) -> bool:
    return str(r.get("employeeId")) == employee_id and r.get("date") == format_date(work_date)


class JsonAttendanceRepository(AttendanceRepository):
    def __init__(self, store: JsonRecordStore):
        self._store = store

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._store.load(ATTENDANCE):
            if _matches(r, employee_id, work_date):
                return attendance_from_record(r)
        return None

    def list_for_employee(self, employee_id: str) -> Sequence[AttendanceRecord]:
        rows = [attendance_from_record(r) for r in self._store.load(ATTENDANCE) if str(r.get("employeeId")) == employee_id]
        # Stable sort keeps creation order within a day.
        return sorted(rows, key=lambda rec: rec.work_date)

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        key = format_date(work_date)
        return [attendance_from_record(r) for r in self._store.load(ATTENDANCE) if r.get("date") == key]

    def list_all(self) -> Sequence[AttendanceRecord]:
        return [attendance_from_record(r) for r in self._store.load(ATTENDANCE)]

    def create_checkin(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        check_in: time,
    ) -> AttendanceRecord:
        with self._store.locked(ATTENDANCE) as snapshot:
            if snapshot.find_index(lambda r: _matches(r, employee_id, work_date)) is not None:
                raise AlreadyCheckedInError("Already checked in today")

            rec = AttendanceRecord(
                attendance_id=next_record_id(snapshot.records),
                employee_id=employee_id,
                employee_name=employee_name,
                work_date=work_date,
                check_in=check_in,
                check_out=None,
                status=EmployeeStatus.PRESENT,
            )
            snapshot.append(attendance_to_record(rec))
        return rec

    def update_checkout(self, *, employee_id: str, work_date: date, check_out: time) -> AttendanceRecord:
        with self._store.locked(ATTENDANCE) as snapshot:
            index = snapshot.find_index(lambda r: _matches(r, employee_id, work_date))
            if index is None:
                raise NoCheckInFoundError("No check-in record found for today")

            record = snapshot.records[index]
            if record.get("checkOut"):
                raise AlreadyCheckedOutError("Already checked out today")

            record = {**record, "checkOut": format_time(check_out)}
            snapshot.replace(index, record)
        return attendance_from_record(record)
