"""FastAPIアプリケーションファクトリー"""

import logging
from typing import Any, Optional

import sentry_sdk
from fastapi import FastAPI

from ..presentation import api_router
from ..presentation.exception_handlers import register_exception_handlers
from ..presentation.middleware.error_handler import error_response_middleware
from ..presentation.middleware.session import session_middleware
from ..store import CassandraStore
from .config import get_settings
from .lifespan import lifespan
from .logging import get_logger

logger = get_logger(__name__)


class HealthCheckFilter(logging.Filter):
    """ヘルスチェックログを除外するフィルター"""

    def filter(self, record: logging.LogRecord) -> bool:
        return "/api/system/healthcheck" not in record.getMessage()


def init_sentry() -> None:
    """SENTRY_DSNが設定されている場合のみSentryを初期化"""
    settings = get_settings()
    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENV_MODE,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        )
        logger.info(f"Sentry is enabled on {settings.ENV_MODE} mode")
    else:
        logger.info(f"Sentry is disabled on {settings.ENV_MODE} mode")


def create_app(store: Optional[CassandraStore] = None) -> FastAPI:
    """
    FastAPIアプリケーションを生成

    Args:
        store: セッションストア（Noneの場合は起動時に設定から生成）

    Returns:
        FastAPIアプリケーションインスタンス
    """
    settings = get_settings()

    app_params: dict[str, Any] = {
        "title": "Cassandra Sessions",
        "description": "Cassandraバックエンドのサーバーサイドセッション",
        "version": "0.1.0",
        "lifespan": lifespan,
    }

    # 本番環境ではドキュメントを無効化
    if settings.is_production:
        app_params["docs_url"] = None
        app_params["redoc_url"] = None
        app_params["openapi_url"] = None

    init_sentry()

    app = FastAPI(**app_params)
    app.state.session_store = store

    logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())

    register_exception_handlers(app)

    # 後に登録したミドルウェアが外側になる
    app.middleware("http")(session_middleware)
    app.middleware("http")(error_response_middleware)

    app.include_router(api_router, prefix="/api")

    return app
