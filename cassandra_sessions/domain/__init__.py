"""Domain layer - Session types and errors"""

from .exceptions import (
    BadRequestError,
    CodecError,
    CookieDecodeError,
    DomainError,
    InvalidSessionIdError,
    InvalidTableNameError,
    NotFoundError,
    SessionExpiredError,
    SessionNotFoundError,
    SessionValueError,
    ValidationError,
)
from .sessions import Options, Registry, Session, SessionStore, get_registry

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
    "Options",
    "Registry",
    "Session",
    "SessionStore",
    "get_registry",
]
