from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employee accounts.

    Note: services depend on this interface, not on a concrete storage.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, employee: Employee) -> Employee:
        """Insert a new account; raises DuplicateIdentityError on id/email clash."""

        raise NotImplementedError

    def update(self, employee_id: str, fields: Mapping[str, Any]) -> Employee:
        """Merge the supplied fields; ``status`` and unknown keys are ignored."""

        raise NotImplementedError

    def sync_status(self, employee_id: str, derive: Callable[[], EmployeeStatus]) -> Optional[EmployeeStatus]:
        """Store the status returned by ``derive()``, evaluated while the account is locked.

        Returns the stored status, or None when the employee does not exist.
        """

        raise NotImplementedError
