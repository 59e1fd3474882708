"""セッションテーブルのスキーマ定義"""

from typing import Any

from ...core.config import TABLE_NAME_PATTERN
from ...core.logging import get_logger
from ...domain.exceptions import InvalidTableNameError

logger = get_logger(__name__)

CREATE_TABLE_QUERY = (
    "CREATE TABLE IF NOT EXISTS {table} ("
    "id uuid, "
    "session_data blob, "
    "created_on timestamp, "
    "modified_on timestamp, "
    "expires_on timestamp, "
    "PRIMARY KEY(id))"
)


def normalize_table_name(table_name: str) -> str:
    """
    テーブル名を正規化

    前後のバッククォートを除去し、CQL識別子として検証する

    Raises:
        InvalidTableNameError: 識別子として不正な場合
    """
    name = table_name.strip("`")
    if not TABLE_NAME_PATTERN.match(name):
        raise InvalidTableNameError(table_name)
    return name


def create_table_query(table_name: str) -> str:
    return CREATE_TABLE_QUERY.format(table=normalize_table_name(table_name))


def ensure_table(db: Any, table_name: str) -> None:
    """
    セッションテーブルを作成（存在する場合は何もしない）

    Args:
        db: Cassandraセッション
        table_name: テーブル名
    """
    db.execute(create_table_query(table_name))
    logger.info(f"Session table ensured: {table_name}")
