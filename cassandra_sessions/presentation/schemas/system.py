"""システム関連のスキーマ定義"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class CassandraStatus(BaseModel):
    """
    セッションストレージ（Cassandra）の状態

    Attributes:
        status: healthy/unhealthy
        connection: pingが成功したか
        table: セッションテーブル名
        release_version: ノードのCassandraバージョン（ping成功時のみ）
        error: エラーメッセージ（エラー時のみ）
    """

    status: Literal["healthy", "unhealthy"]
    connection: bool
    table: Optional[str] = None
    release_version: Optional[str] = None
    error: Optional[str] = None


class HealthCheckResponse(BaseModel):
    """
    ヘルスチェックレスポンス

    Attributes:
        status: ok/unhealthy
        timestamp: レスポンス生成時刻
        uptime_seconds: 起動からの経過秒数
        cassandra: セッションストレージの状態
        environment: ENV_MODE
    """

    status: Literal["ok", "unhealthy"]
    timestamp: datetime
    uptime_seconds: float
    cassandra: CassandraStatus
    environment: str
