"""
Domain error taxonomy and the error-kind to HTTP status lookup.

Use cases and repositories raise these; the delivery layer never builds status
codes by hand, it asks `get_status_code` instead.
"""
from __future__ import annotations

from typing import Dict, Optional, Type


class DomainError(Exception):
    """Base class for every error the API reports to its callers."""

    default_message = "internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    default_message = "invalid request"


class Unauthorized(DomainError):
    default_message = "unauthorized"


class Forbidden(Unauthorized):
    default_message = "you don't have access to this resource"


class NotFound(DomainError):
    default_message = "your requested item is not found"


class InternalError(DomainError):
    pass


_STATUS_BY_KIND: Dict[Type[BaseException], int] = {
    ValidationError: 400,
    Forbidden: 403,
    Unauthorized: 401,
    NotFound: 404,
    InternalError: 500,
}


# PUBLIC_INTERFACE
def get_status_code(err: BaseException) -> int:
    """
    Map an error to its HTTP status code.

    The most specific registered class in the error's MRO wins, so a Forbidden
    maps to 403 even though it is also an Unauthorized. Anything unregistered
    maps to 500.
    """
    for kind in type(err).__mro__:
        status_code = _STATUS_BY_KIND.get(kind)
        if status_code is not None:
            return status_code
    return 500
