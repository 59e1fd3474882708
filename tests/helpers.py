"""テストヘルパー"""

from datetime import datetime, timedelta
from http.cookies import Morsel, SimpleCookie
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response


SESSION_NAME = "session"
MAX_AGE = 3600
HASH_KEY = b"test-hash-key"
BLOCK_KEY = b"test-block-key"


class Clock:
    """差し替え可能な現在時刻"""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_request(cookies: Optional[dict[str, str]] = None) -> Request:
    """
    クッキー付きのRequestを生成

    Args:
        cookies: クッキー名 -> 値
    """
    headers = []
    if cookies:
        header = "; ".join(f"{name}={value}" for name, value in cookies.items())
        headers.append((b"cookie", header.encode("latin-1")))
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": headers,
    }
    return Request(scope)


def get_set_cookie(response: Response, name: str) -> Optional[Morsel]:
    """レスポンスのSet-Cookieから指定名のクッキーを取得"""
    for header in response.headers.getlist("set-cookie"):
        cookie: SimpleCookie = SimpleCookie()
        cookie.load(header)
        if name in cookie:
            return cookie[name]
    return None
