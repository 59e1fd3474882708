"""セッション関連の例外クラス"""

from datetime import datetime
from typing import Any, Optional

from .base import DomainError, NotFoundError, ValidationError


class SessionNotFoundError(NotFoundError):
    """セッション行が存在しない"""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            message=f"Session not found: {session_id}",
            details={"session_id": session_id},
        )
        self.session_id = session_id


class SessionExpiredError(DomainError):
    """セッションの有効期限切れ"""

    def __init__(self, session_id: str, expires_on: datetime) -> None:
        super().__init__(
            message="Session expired",
            code="session_expired",
            details={"session_id": session_id, "expires_on": expires_on.isoformat()},
        )
        self.session_id = session_id
        self.expires_on = expires_on


class CodecError(DomainError):
    """
    コーデックのエンコード/デコードエラー

    Attributes:
        errors: 個々のコーデックで発生したエラー
    """

    def __init__(
        self,
        message: str = "Codec error",
        errors: Optional[list[Exception]] = None,
        code: str = "codec_error",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)
        self.errors = errors or []


class CookieDecodeError(CodecError):
    """どのコーデックでも検証できなかった"""

    def __init__(self, name: str, errors: list[Exception]) -> None:
        super().__init__(
            message=f"Failed to decode value for {name!r}",
            errors=errors,
            code="cookie_decode_error",
            details={"name": name, "errors": [str(e) for e in errors]},
        )
        self.name = name


class SessionValueError(ValidationError):
    """予約キーの値が不正"""

    def __init__(self, key: str, value: Any) -> None:
        super().__init__(
            message=f"Invalid value for {key!r}: expected a timestamp",
            details={"key": key, "type": type(value).__name__},
        )
        self.key = key


class InvalidSessionIdError(ValidationError):
    """セッションIDがUUIDの正規形式でない"""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            message=f"Invalid session id: {session_id!r}",
            details={"session_id": session_id},
        )
        self.session_id = session_id


class InvalidTableNameError(ValidationError):
    """テーブル名がCQL識別子として不正"""

    def __init__(self, table_name: str) -> None:
        super().__init__(
            message=f"Invalid table name: {table_name!r}",
            details={"table_name": table_name},
        )
        self.table_name = table_name
