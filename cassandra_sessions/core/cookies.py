from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Response

from ..domain.sessions import Options
from .time import seconds_from_now

# Max-Ageが負数のクッキーに付けるExpires
EXPIRED_COOKIE_DATE = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)


def set_session_cookie(resp: Response, name: str, value: str, options: Options) -> None:
    expires: datetime | None = None
    if options.max_age > 0:
        expires = seconds_from_now(options.max_age)
    elif options.max_age < 0:
        expires = EXPIRED_COOKIE_DATE

    resp.set_cookie(
        key=name,
        value=value,
        max_age=options.max_age if options.max_age != 0 else None,
        expires=expires,
        path=options.path,
        domain=options.domain,
        secure=options.secure,
        httponly=options.http_only,
        samesite=options.same_site,
    )


def clear_session_cookie(resp: Response, name: str, options: Options) -> None:
    expired = options.copy()
    expired.max_age = -1
    set_session_cookie(resp, name, "", expired)
