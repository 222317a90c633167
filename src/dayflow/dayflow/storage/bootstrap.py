from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_ID, DEFAULT_ADMIN_PASSWORD, EMPLOYEES
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from .record_store import JsonRecordStore

logger = logging.getLogger(__name__)


def default_admin(*, password: str = DEFAULT_ADMIN_PASSWORD) -> Employee:
    return Employee(
        employee_id=DEFAULT_ADMIN_ID,
        email=DEFAULT_ADMIN_EMAIL,
        password_hash=generate_password_hash(password),
        role=Role.ADMIN,
        name="Admin User",
        join_date=now_local().date(),
        phone="1234567890",
        address="123 Admin St",
        department="Management",
        position="Administrator",
        salary=100000.0,
    )


def initialize_data(
    store: JsonRecordStore,
    employees: EmployeeRepository,
    *,
    upload_dir: Optional[str | Path] = None,
    seed_admin: bool = True,
) -> bool:
    """Create the data layout and seed the admin account on first start.

    Failures are logged and the application keeps running on empty
    collections. Returns True when the layout is complete.
    """

    try:
        first_run = not store.exists(EMPLOYEES)
        store.bootstrap()
        if upload_dir is not None:
            (Path(upload_dir) / "profiles").mkdir(parents=True, exist_ok=True)
        if first_run and seed_admin:
            admin = employees.create(default_admin())
            logger.info("Seeded default admin %s <%s>", admin.employee_id, admin.email)
        return True
    except (OSError, DomainError) as exc:
        logger.warning("Data initialisation failed, starting with empty collections: %s", exc)
        return False
