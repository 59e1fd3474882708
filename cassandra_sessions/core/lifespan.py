"""アプリケーションライフサイクル管理"""

import contextlib
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool

from .logging import get_logger
from .store_factory import create_store_from_settings

logger = get_logger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    アプリケーションのライフサイクル管理

    起動時:
    - 起動時刻の記録
    - セッションストアの生成（注入されていない場合のみ）

    シャットダウン時:
    - 自身で生成したセッションストアのクローズ

    Args:
        app: FastAPIアプリケーション
    """
    app.state.start_time = datetime.now(timezone.utc)

    owns_store = getattr(app.state, "session_store", None) is None
    if owns_store:
        app.state.session_store = await run_in_threadpool(create_store_from_settings)
        logger.info("Session store created from settings")
    else:
        logger.info("Using injected session store")

    yield

    if owns_store:
        await run_in_threadpool(app.state.session_store.close)
        app.state.session_store = None
        logger.info("Session store closed")
