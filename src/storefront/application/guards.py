"""Small checks shared by the use-case handlers."""

from __future__ import annotations

from storefront.domain.exceptions import UnauthenticatedError
from storefront.domain.model.user import Principal


def require_principal(principal: Principal | None) -> Principal:
    """Reject anonymous callers."""
    if principal is None:
        raise UnauthenticatedError("You must be logged in to do this")
    return principal
