class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class NotFoundError(DomainError):
    """Raised when a referenced employee does not exist."""


class AuthenticationError(DomainError):
    """Raised when admin credentials or tokens are invalid."""


class PolicyRejection(DomainError):
    """Expected business outcome: the attendance rules refuse the action."""


class OutOfWindow(PolicyRejection):
    """The action was attempted outside its admission window."""


class AlreadyClockedIn(PolicyRejection):
    pass


class AlreadyClockedOut(PolicyRejection):
    pass


class NotClockedIn(PolicyRejection):
    pass


class DuplicateRecord(PolicyRejection):
    """A record for (employee, date) already exists; lost a concurrent write."""


class ResolverError(DomainError):
    """The face recognition service is unreachable or answered nonsense.

    Distinct from a no-match: callers must be able to tell "not recognized"
    from "recognition unavailable".
    """
