from fastapi import APIRouter, Depends, Request, Response

from ....domain.sessions import Session
from ....store import CassandraStore
from ...schemas.session import (
    SessionDeletedResponse,
    SessionResponse,
    SessionUpdateRequest,
)
from ..deps import get_current_session, get_session_store

router = APIRouter()


@router.get("/", response_model=SessionResponse)
async def read_session(session: Session = Depends(get_current_session)) -> SessionResponse:
    """
    現在のセッション
    """
    return SessionResponse(is_new=session.is_new, values=session.values)


@router.put("/", response_model=SessionResponse)
def update_session(
    body: SessionUpdateRequest,
    request: Request,
    response: Response,
    session: Session = Depends(get_current_session),
    store: CassandraStore = Depends(get_session_store),
) -> SessionResponse:
    """
    セッション値をマージして保存
    """
    session.values.update(body.values)
    store.save(request, response, session)
    return SessionResponse(is_new=session.is_new, values=session.values)


@router.delete("/", response_model=SessionDeletedResponse)
def delete_session(
    request: Request,
    response: Response,
    session: Session = Depends(get_current_session),
    store: CassandraStore = Depends(get_session_store),
) -> SessionDeletedResponse:
    """
    セッションを削除（ログアウト）
    """
    store.delete(request, response, session)
    return SessionDeletedResponse()
