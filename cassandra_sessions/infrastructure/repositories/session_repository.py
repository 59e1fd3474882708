"""
セッション行リポジトリ

単一テーブルに対するINSERT/UPDATE/DELETE/SELECTのプリペアドステートメントを保持し、
セッションIDをキーとした行の永続化のみを提供する（セッションの意味論は持たない）。
ドライバの例外はそのまま呼び出し元へ伝播する。
"""

import uuid
from typing import Any, Optional

from cassandra import ConsistencyLevel

from ...core.logging import get_logger
from ...domain.exceptions import SessionNotFoundError
from ..database.models import SessionRow
from ..database.schema import normalize_table_name

logger = get_logger(__name__)


class SessionRepository:
    """
    セッション行リポジトリ

    Attributes:
        db: Cassandraセッション（リクエスト間で共有）
        table_name: テーブル名
    """

    def __init__(self, db: Any, table_name: str) -> None:
        """
        Args:
            db: Cassandraセッション
            table_name: テーブル名（バッククォートは除去される）
        """
        self.db = db
        self.table_name = normalize_table_name(table_name)

        self.stmt_insert = (
            f"INSERT INTO {self.table_name} "
            "(id, session_data, created_on, modified_on, expires_on) "
            "VALUES (?, ?, ?, ?, ?)"
        )
        self.stmt_update = (
            f"UPDATE {self.table_name} "
            "SET session_data = ?, created_on = ?, expires_on = ?, modified_on = ? "
            "WHERE id = ?"
        )
        self.stmt_delete = f"DELETE FROM {self.table_name} WHERE id = ?"
        self.stmt_select = (
            "SELECT id, session_data, created_on, modified_on, expires_on "
            f"FROM {self.table_name} WHERE id = ?"
        )

        self._insert = self._prepare(self.stmt_insert)
        self._update = self._prepare(self.stmt_update)
        self._delete = self._prepare(self.stmt_delete)
        self._select = self._prepare(self.stmt_select)

    def _prepare(self, query: str) -> Any:
        prepared = self.db.prepare(query)
        prepared.consistency_level = ConsistencyLevel.QUORUM
        return prepared

    def insert(self, row: SessionRow) -> None:
        """行を挿入"""
        self.db.execute(self._insert, row.to_insert_params())
        logger.debug(f"Session row inserted: {row.id}")

    def update(self, row: SessionRow) -> None:
        """行を上書き"""
        self.db.execute(self._update, row.to_update_params())
        logger.debug(f"Session row updated: {row.id}")

    def delete(self, session_id: uuid.UUID) -> None:
        """行を削除（存在しなくてもエラーにしない）"""
        self.db.execute(self._delete, (session_id,))
        logger.debug(f"Session row deleted: {session_id}")

    def select(self, session_id: uuid.UUID) -> SessionRow:
        """
        行を取得

        Raises:
            SessionNotFoundError: 行が存在しない場合
        """
        result = self.db.execute(self._select, (session_id,)).one()
        if result is None:
            logger.debug(f"Session row not found: {session_id}")
            raise SessionNotFoundError(str(session_id))
        return SessionRow.from_db(result)

    def ping(self) -> Optional[str]:
        """
        接続確認用の軽量クエリ

        Returns:
            接続先ノードのrelease_version
        """
        row = self.db.execute("SELECT release_version FROM system.local").one()
        return row[0] if row is not None else None

    def close(self, shutdown_cluster: bool = False) -> None:
        """
        セッションを閉じる

        Args:
            shutdown_cluster: クラスタも停止する場合True
        """
        self.db.shutdown()
        if shutdown_cluster:
            self.db.cluster.shutdown()
