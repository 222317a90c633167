from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import format_date, format_timestamp, parse_iso_date, parse_timestamp
from ..core.constants import LEAVES
from ..core.enums import LeaveStatus
from ..core.exceptions import AlreadyDecidedError, NotFoundError
from ..storage.record_store import JsonRecordStore, Record, next_record_id
from .model import LeaveRequest
from .repository import LeaveRepository


def leave_to_record(req: LeaveRequest) -> Record:
    return {
        "id": req.leave_id,
        "employeeId": req.employee_id,
        "employeeName": req.employee_name,
        "leaveType": req.leave_type,
        "startDate": format_date(req.start_date),
        "endDate": format_date(req.end_date),
        "remarks": req.remarks,
        "status": req.status.value,
        "appliedDate": format_date(req.applied_date),
        "decidedBy": req.decided_by,
        "decidedAt": format_timestamp(req.decided_at),
    }


def leave_from_record(r: Record) -> LeaveRequest:
    return LeaveRequest(
        leave_id=str(r["id"]),
        employee_id=str(r["employeeId"]),
        employee_name=r.get("employeeName") or "",
        leave_type=r.get("leaveType") or "",
        start_date=parse_iso_date(r["startDate"]),
        end_date=parse_iso_date(r["endDate"]),
        remarks=r.get("remarks") or "",
        status=LeaveStatus(r.get("status") or LeaveStatus.PENDING.value),
        applied_date=parse_iso_date(r["appliedDate"]),
        decided_by=r.get("decidedBy"),
        decided_at=parse_timestamp(r.get("decidedAt")),
    )


class JsonLeaveRepository(LeaveRepository):
    def __init__(self, store: JsonRecordStore):
        self._store = store

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
        with self._store.locked(LEAVES) as snapshot:
            req = LeaveRequest(
                leave_id=next_record_id(snapshot.records),
                employee_id=employee_id,
                employee_name=employee_name,
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                remarks=remarks,
                status=LeaveStatus.PENDING,
                applied_date=applied_date,
            )
            snapshot.append(leave_to_record(req))
        return req

    def get_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        for r in self._store.load(LEAVES):
            if str(r.get("id")) == leave_id:
                return leave_from_record(r)
        return None

    def list_for_employee(self, employee_id: str) -> Sequence[LeaveRequest]:
        return [leave_from_record(r) for r in self._store.load(LEAVES) if str(r.get("employeeId")) == employee_id]

    def list_all(self) -> Sequence[LeaveRequest]:
        return [leave_from_record(r) for r in self._store.load(LEAVES)]

    def count_pending(self) -> int:
        return sum(1 for r in self._store.load(LEAVES) if r.get("status") == LeaveStatus.PENDING.value)

    def decide(
        self,
        *,
        leave_id: str,
        status: LeaveStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> LeaveRequest:
        with self._store.locked(LEAVES) as snapshot:
            index = snapshot.find_index(lambda r: str(r.get("id")) == leave_id)
            if index is None:
                raise NotFoundError("Leave request not found")

            record = snapshot.records[index]
            if record.get("status") != LeaveStatus.PENDING.value:
                raise AlreadyDecidedError(f"Leave request is already {record.get('status')}")

            record = {
                **record,
                "status": status.value,
                "decidedBy": decided_by,
                "decidedAt": format_timestamp(decided_at),
            }
            snapshot.replace(index, record)
        return leave_from_record(record)
