from .base import BadRequestError, DomainError, NotFoundError, ValidationError
from .session import (
    CodecError,
    CookieDecodeError,
    InvalidSessionIdError,
    InvalidTableNameError,
    SessionExpiredError,
    SessionNotFoundError,
    SessionValueError,
)

__all__ = [
    "DomainError",
    "NotFoundError",
    "BadRequestError",
    "ValidationError",
    "SessionNotFoundError",
    "SessionExpiredError",
    "CodecError",
    "CookieDecodeError",
    "SessionValueError",
    "InvalidSessionIdError",
    "InvalidTableNameError",
]
