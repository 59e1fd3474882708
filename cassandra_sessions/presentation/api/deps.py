from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from ...core.config import get_settings
from ...core.logging import get_logger
from ...domain.sessions import Session
from ...store import CassandraStore
from ..middleware.session import SESSION_STORE_STATE_KEY

logger = get_logger(__name__)


def get_session_store(request: Request) -> CassandraStore:
    """
    セッションストアを取得するdependency
    """
    store = getattr(request.state, SESSION_STORE_STATE_KEY, None)
    if store is None:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session store not configured",
        )
    return store


def get_current_session(
    request: Request, store: CassandraStore = Depends(get_session_store)
) -> Session:
    """
    現在のリクエストのセッションを取得するdependency

    クッキーが不正な場合も新規セッションを返す
    """
    settings = get_settings()
    session, error = store.get(request, settings.SESSION_COOKIE_NAME)
    if error is not None:
        logger.info(f"Ignoring invalid session cookie: {error}")
    return session
