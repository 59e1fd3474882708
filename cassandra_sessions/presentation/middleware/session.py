"""セッション管理ミドルウェア"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response

SESSION_STORE_STATE_KEY = "session_store"


async def session_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    セッション管理ミドルウェア

    アプリケーションに登録されたセッションストアをリクエストに紐づける。
    セッションの保存は各エンドポイントで明示的に行う。

    Args:
        request: HTTPリクエスト
        call_next: 次のミドルウェア/エンドポイント

    Returns:
        HTTPレスポンス
    """
    store = getattr(request.app.state, SESSION_STORE_STATE_KEY, None)
    setattr(request.state, SESSION_STORE_STATE_KEY, store)
    return await call_next(request)
