"""
Presentation層のAPIエラークラス

ドメインエラーをHTTPレスポンスに変換する。
"""

from typing import Any, Optional

from fastapi import HTTPException, status
from pydantic import BaseModel

from ...domain.exceptions import (
    BadRequestError,
    CodecError,
    DomainError,
    NotFoundError,
    SessionExpiredError,
    ValidationError,
)


class ErrorResponse(BaseModel):
    """
    標準エラーレスポンス

    Attributes:
        status: ステータス（常に"error"）
        code: エラーコード
        message: エラーメッセージ
        details: エラーの詳細情報（オプション）
    """

    status: str = "error"
    code: str
    message: str
    details: Optional[list[dict[str, Any]] | dict[str, Any]] = None


class APIError(HTTPException):
    """
    API エラーの基底クラス

    Attributes:
        status_code: HTTPステータスコード
        error_code: エラーコード
        error_message: エラーメッセージ
        details: エラーの詳細情報
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_server_error"
    error_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[list[dict[str, Any]] | dict[str, Any]] = None,
    ) -> None:
        self.error_message = message or self.error_message
        self.details = details
        super().__init__(status_code=self.status_code, detail=self.error_message)

    def to_response(self) -> ErrorResponse:
        """標準エラーレスポンス形式に変換"""
        return ErrorResponse(
            code=self.error_code, message=self.error_message, details=self.details
        )


# サブクラスは継承元のステータスコードを引き継ぐ（MRO順に探索）
STATUS_MAP: dict[type, int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    CodecError: status.HTTP_400_BAD_REQUEST,
    SessionExpiredError: status.HTTP_401_UNAUTHORIZED,
}


def domain_error_to_api_error(domain_error: DomainError) -> APIError:
    """
    ドメインエラーをAPIエラーに変換

    Args:
        domain_error: ドメイン層のエラー

    Returns:
        APIError: API層のエラー

    Examples:
        >>> from cassandra_sessions.domain.exceptions import SessionNotFoundError
        >>> api_err = domain_error_to_api_error(SessionNotFoundError("abc"))
        >>> api_err.status_code
        404
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for cls in type(domain_error).__mro__:
        if cls in STATUS_MAP:
            status_code = STATUS_MAP[cls]
            break

    api_error = APIError(
        message=domain_error.message,
        details=domain_error.details,
    )
    api_error.status_code = status_code
    api_error.error_code = domain_error.code
    api_error.error_message = domain_error.message

    return api_error
