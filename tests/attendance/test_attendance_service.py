from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, time, timedelta

import pytest

from src.dayflow.dayflow.core.enums import EmployeeStatus, Role
from src.dayflow.dayflow.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthorizationError,
    NoCheckInFoundError,
    NotFoundError,
    StorageUnavailableError,
)


@pytest.fixture
def svc(container, make_employee):
    container.employees_repo.create(make_employee("EMP010", name="Jane Doe"))
    return container.attendance_service


def test_check_in_creates_open_record_and_marks_present(svc, container, fixed_now):
    record = svc.check_in("EMP010", now=fixed_now)

    assert record.work_date == fixed_now.date()
    assert record.check_in == time(9, 0, 0)
    assert record.check_out is None
    assert record.employee_name == "Jane Doe"
    assert container.employees_repo.get_by_id("EMP010").status == EmployeeStatus.PRESENT


def test_check_out_closes_record_and_marks_absent(svc, container, fixed_now):
    svc.check_in("EMP010", now=fixed_now)

    record = svc.check_out("EMP010", now=fixed_now.replace(hour=17, minute=30))

    assert record.check_out == time(17, 30)
    assert container.employees_repo.get_by_id("EMP010").status == EmployeeStatus.ABSENT


def test_concurrent_check_ins_admit_exactly_one(svc, container, fixed_now):
    def attempt(_):
        try:
            svc.check_in("EMP010", now=fixed_now)
            return "ok"
        except AlreadyCheckedInError:
            return "already"

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(16)))

    assert outcomes.count("ok") == 1
    assert outcomes.count("already") == 15
    assert len(container.attendance_repo.list_for_employee("EMP010")) == 1


def test_check_out_without_check_in(svc, fixed_now):
    with pytest.raises(NoCheckInFoundError):
        svc.check_out("EMP010", now=fixed_now)


def test_second_check_out_fails(svc, fixed_now):
    svc.check_in("EMP010", now=fixed_now)
    svc.check_out("EMP010", now=fixed_now.replace(hour=17))

    with pytest.raises(AlreadyCheckedOutError):
        svc.check_out("EMP010", now=fixed_now.replace(hour=18))


def test_checked_out_day_is_terminal(svc, fixed_now):
    svc.check_in("EMP010", now=fixed_now)
    svc.check_out("EMP010", now=fixed_now.replace(hour=17))

    with pytest.raises(AlreadyCheckedInError):
        svc.check_in("EMP010", now=fixed_now.replace(hour=18))


def test_yesterday_check_in_does_not_block_today(svc, fixed_now):
    svc.check_in("EMP010", now=fixed_now - timedelta(days=1))

    record = svc.check_in("EMP010", now=fixed_now)
    assert record.work_date == fixed_now.date()

    with pytest.raises(NoCheckInFoundError):
        svc.check_out("EMP010", now=fixed_now + timedelta(days=1))


def test_unknown_employee_cannot_check_in(svc, fixed_now):
    with pytest.raises(NotFoundError):
        svc.check_in("EMP404", now=fixed_now)


def test_history_is_ordered_by_date(svc, fixed_now):
    for offset in (3, 1, 2):
        svc.check_in("EMP010", now=fixed_now - timedelta(days=offset))

    dates = [r.work_date for r in svc.history("EMP010")]
    assert dates == sorted(dates)
    assert len(dates) == 3


def test_record_stands_when_status_mirror_fails(svc, container, fixed_now, monkeypatch):
    def unavailable(employee_id, derive):
        raise StorageUnavailableError("employees.json is locked")

    monkeypatch.setattr(container.employees_repo, "sync_status", unavailable)

    record = svc.check_in("EMP010", now=fixed_now)

    assert container.attendance_repo.get_for_employee_and_date("EMP010", fixed_now.date()) == record
    assert container.employees_repo.get_by_id("EMP010").status == EmployeeStatus.ABSENT


def test_list_all_is_admin_only(svc, container, make_employee, fixed_now):
    container.employees_repo.create(make_employee("EMP011"))
    svc.check_in("EMP010", now=fixed_now)
    svc.check_in("EMP011", now=fixed_now)

    with pytest.raises(AuthorizationError):
        svc.list_all(current_role=Role.EMPLOYEE)

    assert len(svc.list_all(current_role=Role.ADMIN)) == 2
    own = svc.list_visible(current_user_id="EMP011", current_role=Role.EMPLOYEE)
    assert [r.employee_id for r in own] == ["EMP011"]


def test_open_employee_ids(svc, container, make_employee, fixed_now):
    container.employees_repo.create(make_employee("EMP011"))
    svc.check_in("EMP010", now=fixed_now)
    svc.check_in("EMP011", now=fixed_now)
    svc.check_out("EMP011", now=fixed_now.replace(hour=12))

    assert svc.open_employee_ids(fixed_now.date()) == {"EMP010"}
    assert svc.open_employee_ids(datetime(2024, 6, 2).date()) == set()


def test_late_check_in_mirror_does_not_undo_check_out(svc, container, fixed_now, monkeypatch):
    repo = container.employees_repo
    original = repo.sync_status
    reached = threading.Event()
    release = threading.Event()

    def held(employee_id, derive):
        # Only the check-in thread waits; the check-out below runs on the main thread.
        if threading.current_thread() is not threading.main_thread():
            reached.set()
            assert release.wait(5)
        return original(employee_id, derive)

    monkeypatch.setattr(repo, "sync_status", held)

    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(svc.check_in, "EMP010", now=fixed_now)
        assert reached.wait(5)
        svc.check_out("EMP010", now=fixed_now + timedelta(hours=8))
        release.set()
        pending.result(timeout=5)

    assert repo.get_by_id("EMP010").status == EmployeeStatus.ABSENT
    assert svc.status_for("EMP010", fixed_now.date()) == EmployeeStatus.ABSENT


def test_status_for_follows_todays_record(svc, fixed_now):
    assert svc.status_for("EMP010", fixed_now.date()) == EmployeeStatus.ABSENT

    svc.check_in("EMP010", now=fixed_now)
    assert svc.status_for("EMP010", fixed_now.date()) == EmployeeStatus.PRESENT
    assert svc.status_for("EMP010", (fixed_now + timedelta(days=1)).date()) == EmployeeStatus.ABSENT

    svc.check_out("EMP010", now=fixed_now.replace(hour=17))
    assert svc.status_for("EMP010", fixed_now.date()) == EmployeeStatus.ABSENT
