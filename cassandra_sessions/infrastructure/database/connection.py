from typing import Optional, Sequence

from cassandra import ConsistencyLevel
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, Session

from ...core.config import Settings
from ...core.logging import get_logger

logger = get_logger(__name__)


def create_cluster(
    hosts: Sequence[str],
    port: int = 9042,
    auth_provider: Optional[PlainTextAuthProvider] = None,
) -> Cluster:
    """
    QUORUM整合性のクラスタを生成

    Args:
        hosts: コンタクトポイント
        port: ネイティブプロトコルのポート
        auth_provider: 認証プロバイダ（オプション）
    """
    profile = ExecutionProfile(consistency_level=ConsistencyLevel.QUORUM)
    return Cluster(
        contact_points=list(hosts),
        port=port,
        auth_provider=auth_provider,
        execution_profiles={EXEC_PROFILE_DEFAULT: profile},
    )


def connect(
    hosts: Sequence[str],
    keyspace: str,
    port: int = 9042,
    auth_provider: Optional[PlainTextAuthProvider] = None,
) -> Session:
    """
    クラスタに接続してkeyspaceを選択したセッションを返す

    Raises:
        cassandra.cluster.NoHostAvailable: 接続できない場合
    """
    cluster = create_cluster(hosts, port=port, auth_provider=auth_provider)
    try:
        session = cluster.connect(keyspace)
    except Exception:
        cluster.shutdown()
        raise
    logger.info(f"Cassandra connection established: {','.join(hosts)}/{keyspace}")
    return session


def auth_provider_from_settings(settings: Settings) -> Optional[PlainTextAuthProvider]:
    """設定から認証プロバイダを生成（認証情報がなければNone）"""
    if not settings.has_cassandra_auth:
        return None
    return PlainTextAuthProvider(
        username=settings.CASSANDRA_USERNAME, password=settings.CASSANDRA_PASSWORD
    )
