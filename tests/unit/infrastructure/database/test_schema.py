"""
セッションテーブルスキーマの単体テスト
"""

import pytest

from cassandra_sessions.domain.exceptions import InvalidTableNameError
from cassandra_sessions.infrastructure.database.schema import (
    create_table_query,
    ensure_table,
    normalize_table_name,
)
from tests.fakes import FakeCassandraSession


class TestNormalizeTableName:
    """テーブル名正規化のテスト"""

    @pytest.mark.parametrize(
        "table_name, expected",
        [
            ("sessions", "sessions"),
            ("`sessions`", "sessions"),
            ("app.sessions", "app.sessions"),
            ("`app.sessions`", "app.sessions"),
            ("user_sessions_2", "user_sessions_2"),
        ],
    )
    def test_valid(self, table_name: str, expected: str) -> None:
        """有効なテーブル名が正規化されること"""
        assert normalize_table_name(table_name) == expected

    @pytest.mark.parametrize(
        "table_name",
        ["", "``", "1sessions", "sessions; DROP TABLE users", "a.b.c", "my-table"],
    )
    def test_invalid(self, table_name: str) -> None:
        """不正なテーブル名はInvalidTableNameErrorとなること"""
        with pytest.raises(InvalidTableNameError):
            normalize_table_name(table_name)


class TestCreateTable:
    """テーブル作成のテスト"""

    def test_create_table_query(self) -> None:
        """5列と主キーを持つテーブル定義が生成されること"""
        query = create_table_query("`sessions`")

        assert query.startswith("CREATE TABLE IF NOT EXISTS sessions (")
        for column in (
            "id uuid",
            "session_data blob",
            "created_on timestamp",
            "modified_on timestamp",
            "expires_on timestamp",
            "PRIMARY KEY(id)",
        ):
            assert column in query

    def test_ensure_table_is_idempotent(self) -> None:
        """繰り返し実行してもエラーにならないこと"""
        db = FakeCassandraSession()

        ensure_table(db, "sessions")
        ensure_table(db, "sessions")

        assert "sessions" in db.tables
        assert len(db.executed) == 2
