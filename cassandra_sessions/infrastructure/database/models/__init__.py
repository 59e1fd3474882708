from .session import (
    CREATED_ON,
    EXPIRES_ON,
    MODIFIED_ON,
    RESERVED_KEYS,
    SessionRow,
    as_utc,
    coerce_timestamp,
    new_session_id,
    parse_session_id,
    to_storage_precision,
    without_reserved,
)

__all__ = [
    "CREATED_ON",
    "MODIFIED_ON",
    "EXPIRES_ON",
    "RESERVED_KEYS",
    "SessionRow",
    "as_utc",
    "coerce_timestamp",
    "new_session_id",
    "parse_session_id",
    "to_storage_precision",
    "without_reserved",
]
