class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "authentication_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "authorization_error"


class NotFoundError(DomainError):
    """Raised when an employee, attendance record or leave request is missing."""

    code = "not_found"


class DuplicateIdentityError(DomainError):
    """Raised when an employee id or email is already taken."""

    code = "duplicate_identity"


class AlreadyCheckedInError(DomainError):
    code = "already_checked_in"


class AlreadyCheckedOutError(DomainError):
    code = "already_checked_out"


class NoCheckInFoundError(DomainError):
    code = "no_check_in_found"


class AlreadyDecidedError(DomainError):
    """Raised when a leave request has already left the pending state."""

    code = "already_decided"


class StorageUnavailableError(DomainError):
    """Raised when a collection cannot be read, locked or persisted.

    The previously persisted snapshot stays authoritative.
    """

    code = "storage_unavailable"
