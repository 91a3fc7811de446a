"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and display user-friendly
messages.  Each class carries a stable ``kind`` string that outer layers map
to exit messages or HTTP status codes.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "Unexpected"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = "Validation"


class InvalidOrderError(ValidationError):
    """The order request itself is malformed (no items, bad quantity)."""

    kind = "InvalidOrder"


class InvalidTransitionError(ValidationError):
    """The requested order status change is not allowed."""

    kind = "InvalidTransition"


class InsufficientStockError(ValidationError):
    kind = "InsufficientStock"


class ProductUnavailableError(ValidationError):
    kind = "ProductUnavailable"


class CategoryInUseError(ValidationError):
    kind = "CategoryInUse"


class DuplicateNameError(ValidationError):
    kind = "DuplicateName"


class DuplicateEmailError(ValidationError):
    kind = "DuplicateEmail"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "NotFound"


class ProductNotFoundError(EntityNotFoundError):
    kind = "ProductNotFound"


class OrderNotFoundError(EntityNotFoundError):
    kind = "OrderNotFound"


class CategoryNotFoundError(EntityNotFoundError):
    kind = "CategoryNotFound"


class UserNotFoundError(EntityNotFoundError):
    kind = "UserNotFound"


class ForbiddenError(DomainException):
    """The principal is authenticated but not allowed to do this."""

    kind = "Forbidden"


class UnauthenticatedError(DomainException):
    """No principal, or the credentials could not be verified."""

    kind = "Unauthenticated"


class OperationTimeoutError(DomainException):
    """The operation exceeded its deadline before mutating anything.

    Safe to retry.
    """

    kind = "Timeout"
    retryable = True


class UnexpectedError(DomainException):
    """Wraps an underlying storage or infrastructure failure."""

    kind = "Unexpected"
