"""エラーハンドリングミドルウェア"""

import json
from collections.abc import Awaitable, Callable

import sentry_sdk
from cassandra import DriverException
from fastapi import Request, Response, status
from fastapi.encoders import jsonable_encoder

from ...core.logging import get_logger
from ..exceptions import ErrorResponse

logger = get_logger(__name__)


def _error_response(error: ErrorResponse, status_code: int) -> Response:
    return Response(
        content=json.dumps(jsonable_encoder(error)),
        status_code=status_code,
        media_type="application/json",
    )


async def error_response_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    未処理例外をJSON形式のエラーレスポンスに変換

    - Cassandraドライバの例外（セッションの保存・削除で伝播したもの）は503
    - それ以外は500

    Args:
        request: HTTPリクエスト
        call_next: 次のミドルウェア/エンドポイント

    Returns:
        HTTPレスポンス
    """
    try:
        return await call_next(request)
    except DriverException as e:
        sentry_sdk.capture_exception(e)
        logger.error(
            f"Session storage error on {request.method} {request.url.path}: {e}",
            exc_info=e,
        )
        error = ErrorResponse(
            code="session_storage_unavailable",
            message="Session storage is temporarily unavailable",
            details={"error": type(e).__name__},
        )
        return _error_response(error, status.HTTP_503_SERVICE_UNAVAILABLE)
    except Exception as e:
        sentry_sdk.capture_exception(e)
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {e}",
            exc_info=e,
        )
        error = ErrorResponse(
            code="internal_server_error",
            message="Internal server error occurred",
        )
        return _error_response(error, status.HTTP_500_INTERNAL_SERVER_ERROR)
