"""
セッションクッキーの単体テスト
"""

from fastapi import Response

from cassandra_sessions.core.cookies import clear_session_cookie, set_session_cookie
from cassandra_sessions.domain.sessions import Options
from tests.helpers import get_set_cookie


class TestSetSessionCookie:
    """set_session_cookieのテスト"""

    def test_attributes(self) -> None:
        """Optionsの属性がSet-Cookieに反映されること"""
        response = Response()
        options = Options(
            path="/app",
            domain="example.com",
            max_age=3600,
            secure=True,
            http_only=True,
            same_site="strict",
        )

        set_session_cookie(response, "session", "token", options)

        cookie = get_set_cookie(response, "session")
        assert cookie.value == "token"
        assert cookie["path"] == "/app"
        assert cookie["domain"] == "example.com"
        assert cookie["max-age"] == "3600"
        assert cookie["expires"] != ""
        assert cookie["secure"] is True
        assert cookie["httponly"] is True
        assert cookie["samesite"].lower() == "strict"

    def test_zero_max_age(self) -> None:
        """max_ageが0の場合はMax-AgeもExpiresも付かないこと"""
        response = Response()

        set_session_cookie(response, "session", "token", Options(max_age=0))

        cookie = get_set_cookie(response, "session")
        assert cookie["max-age"] == ""
        assert cookie["expires"] == ""

    def test_negative_max_age(self) -> None:
        """max_ageが負数の場合は過去のExpiresが付くこと"""
        response = Response()

        set_session_cookie(response, "session", "token", Options(max_age=-1))

        cookie = get_set_cookie(response, "session")
        assert cookie["max-age"] == "-1"
        assert "1970" in cookie["expires"]


class TestClearSessionCookie:
    """clear_session_cookieのテスト"""

    def test_clear(self) -> None:
        """空の値とMax-Age=-1で上書きされること"""
        response = Response()
        options = Options(path="/app", max_age=3600)

        clear_session_cookie(response, "session", options)

        cookie = get_set_cookie(response, "session")
        assert cookie.value == ""
        assert cookie["max-age"] == "-1"
        assert cookie["path"] == "/app"

    def test_options_not_modified(self) -> None:
        """渡したOptionsが変更されないこと"""
        options = Options(max_age=3600)

        clear_session_cookie(Response(), "session", options)

        assert options.max_age == 3600
