from __future__ import annotations

from datetime import date, datetime

import pytest

from src.dayflow.dayflow.container import build_container
from src.dayflow.dayflow.core.enums import Role
from src.dayflow.dayflow.storage.record_store import JsonRecordStore
from src.dayflow.dayflow.users.model import Employee


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 9, 0, 0)


@pytest.fixture
def store(tmp_path) -> JsonRecordStore:
    return JsonRecordStore(tmp_path / "data", lock_timeout=2)


@pytest.fixture
def container(tmp_path):
    return build_container(data_dir=tmp_path / "data", upload_dir=tmp_path / "uploads", lock_timeout=2)


@pytest.fixture
def make_employee():
    def _make(employee_id: str = "EMP010", *, email: str | None = None, role: Role = Role.EMPLOYEE, name: str = "Jane Doe") -> Employee:
        return Employee(
            employee_id=employee_id,
            email=email or f"{employee_id.lower()}@dayflow.com",
            password_hash="not-a-real-hash",
            role=role,
            name=name,
            join_date=date(2024, 1, 15),
            department="Engineering",
            position="Developer",
            salary=52000.0,
        )

    return _make
