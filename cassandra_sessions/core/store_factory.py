"""セッションストアのファクトリー"""

from typing import Any, Optional, Sequence

from cassandra.auth import AuthProvider

from ..domain.sessions import Options
from ..infrastructure.database.connection import auth_provider_from_settings, connect
from ..infrastructure.database.schema import ensure_table, normalize_table_name
from ..infrastructure.repositories import SessionRepository
from ..infrastructure.security import codecs_from_pairs
from ..store import CassandraStore
from .config import Settings, get_settings
from .logging import get_logger

logger = get_logger(__name__)


def new_cassandra_store(
    hosts: Sequence[str],
    keyspace: str,
    table_name: str,
    path: str,
    max_age: int,
    *key_pairs: Optional[bytes],
    port: int = 9042,
    auth_provider: Optional[AuthProvider] = None,
) -> CassandraStore:
    """
    クラスタに接続してセッションストアを生成

    接続はQUORUM整合性で確立し、ストアのclose()でクラスタごと停止する

    Args:
        hosts: コンタクトポイント
        keyspace: keyspace名
        table_name: テーブル名
        path: クッキーのPath
        max_age: セッションの有効秒数
        key_pairs: hash/blockキーの交互の並び
        port: ネイティブプロトコルのポート
        auth_provider: 認証プロバイダ（オプション）

    Returns:
        CassandraStore
    """
    db = connect(hosts, keyspace, port=port, auth_provider=auth_provider)
    try:
        return new_cassandra_store_from_connection(
            db, table_name, path, max_age, *key_pairs, owns_connection=True
        )
    except Exception:
        db.cluster.shutdown()
        raise


def new_cassandra_store_from_connection(
    db: Any,
    table_name: str,
    path: str,
    max_age: int,
    *key_pairs: Optional[bytes],
    owns_connection: bool = False,
) -> CassandraStore:
    """
    既存のCassandraセッションからセッションストアを生成

    - テーブル名のバッククォートを除去
    - テーブルを作成（存在する場合は何もしない）
    - プリペアドステートメントを準備
    - キーペアからコーデックチェーンを生成

    Args:
        db: Cassandraセッション
        table_name: テーブル名
        path: クッキーのPath
        max_age: セッションの有効秒数
        key_pairs: hash/blockキーの交互の並び
        owns_connection: close()でクラスタも停止する場合True

    Returns:
        CassandraStore
    """
    table_name = normalize_table_name(table_name)
    ensure_table(db, table_name)

    repository = SessionRepository(db, table_name)
    codecs = codecs_from_pairs(*key_pairs)
    options = Options(path=path, max_age=max_age)

    logger.info(f"Session store ready: table={table_name}, codecs={len(codecs)}")
    return CassandraStore(repository, codecs, options, owns_connection=owns_connection)


def apply_cookie_settings(store: CassandraStore, settings: Settings) -> None:
    """設定のクッキー属性をストアのデフォルトに反映"""
    store.options.domain = settings.SESSION_COOKIE_DOMAIN
    store.options.secure = settings.session_secure
    store.options.http_only = settings.SESSION_HTTP_ONLY


def create_store_from_settings(settings: Optional[Settings] = None) -> CassandraStore:
    """
    設定からセッションストアを生成

    Args:
        settings: 設定（Noneの場合はget_settings()）
    """
    if settings is None:
        settings = get_settings()

    store = new_cassandra_store(
        settings.cassandra_hosts,
        settings.CASSANDRA_KEYSPACE,
        settings.SESSION_TABLE,
        settings.SESSION_COOKIE_PATH,
        settings.SESSION_MAX_AGE,
        *settings.session_key_pairs,
        port=settings.CASSANDRA_PORT,
        auth_provider=auth_provider_from_settings(settings),
    )
    apply_cookie_settings(store, settings)
    return store
