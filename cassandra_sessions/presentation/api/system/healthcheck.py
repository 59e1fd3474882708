from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response, status
from starlette.concurrency import run_in_threadpool

from ....core.config import get_settings
from ....core.logging import get_logger
from ...middleware.session import SESSION_STORE_STATE_KEY
from ...schemas.system import CassandraStatus, HealthCheckResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/", response_model=HealthCheckResponse)
async def healthcheck(request: Request, response: Response) -> HealthCheckResponse:
    """
    ヘルスチェックエンドポイント

    セッションストアのCassandra接続をpingし、uptimeと環境を返す。
    ストア未設定またはping失敗時は503
    """
    settings = get_settings()

    start_time = getattr(request.app.state, "start_time", None)
    uptime_seconds = 0.0
    if start_time:
        uptime_seconds = (datetime.now(timezone.utc) - start_time).total_seconds()

    store = getattr(request.state, SESSION_STORE_STATE_KEY, None)
    if store is None:
        cassandra = CassandraStatus(
            status="unhealthy",
            connection=False,
            error="Session store not configured",
        )
    else:
        table = store.repository.table_name
        try:
            release_version = await run_in_threadpool(store.repository.ping)
            cassandra = CassandraStatus(
                status="healthy",
                connection=True,
                table=table,
                release_version=release_version,
            )
        except Exception as e:
            logger.error(f"Cassandra health check failed: {e}", exc_info=True)
            cassandra = CassandraStatus(
                status="unhealthy", connection=False, table=table, error=str(e)
            )

    overall_status = "ok" if cassandra.status == "healthy" else "unhealthy"
    if overall_status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthCheckResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=uptime_seconds,
        cassandra=cassandra,
        environment=settings.ENV_MODE,
    )
