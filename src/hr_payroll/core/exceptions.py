class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee/leave/attendance/payroll does not exist."""


class ConflictError(DomainError):
    """Raised when a uniqueness or state invariant would be violated."""


class InsufficientBalanceError(ConflictError):
    """Raised when a leave request exceeds the available balance."""


class InvalidStateError(DomainError):
    """Raised when an operation is attempted in the wrong lifecycle state."""


class AuthenticationError(DomainError):
    """Raised when the caller identity is missing or malformed."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
