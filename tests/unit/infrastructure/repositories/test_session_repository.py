"""
セッション行リポジトリの単体テスト
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from cassandra import ConsistencyLevel

from cassandra_sessions.domain.exceptions import SessionNotFoundError
from cassandra_sessions.infrastructure.database.models import SessionRow
from cassandra_sessions.infrastructure.database.schema import ensure_table
from cassandra_sessions.infrastructure.repositories import SessionRepository
from tests.fakes import FakeCassandraSession


@pytest.fixture
def repository(fake_db: FakeCassandraSession) -> SessionRepository:
    ensure_table(fake_db, "sessions")
    return SessionRepository(fake_db, "`sessions`")


def make_row(session_id: uuid.UUID, data: str = "payload") -> SessionRow:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return SessionRow.build(session_id, data, now, now, now + timedelta(hours=1))


class TestSessionRepository:
    """SessionRepositoryのテスト"""

    def test_statements_prepared_with_quorum(
        self, repository: SessionRepository, fake_db: FakeCassandraSession
    ) -> None:
        """4つのステートメントがQUORUMで準備されること"""
        assert len(fake_db.prepared) == 4
        assert all(
            stmt.consistency_level == ConsistencyLevel.QUORUM
            for stmt in fake_db.prepared
        )
        assert repository.table_name == "sessions"
        assert "`" not in repository.stmt_select

    def test_statement_texts(self, repository: SessionRepository) -> None:
        """ステートメントの列順が固定であること"""
        assert repository.stmt_insert == (
            "INSERT INTO sessions "
            "(id, session_data, created_on, modified_on, expires_on) "
            "VALUES (?, ?, ?, ?, ?)"
        )
        assert repository.stmt_update == (
            "UPDATE sessions "
            "SET session_data = ?, created_on = ?, expires_on = ?, modified_on = ? "
            "WHERE id = ?"
        )
        assert repository.stmt_delete == "DELETE FROM sessions WHERE id = ?"

    def test_insert_and_select(self, repository: SessionRepository) -> None:
        """挿入した行を取得できること"""
        session_id = uuid.uuid4()
        row = make_row(session_id)

        repository.insert(row)
        loaded = repository.select(session_id)

        assert loaded.id == session_id
        assert loaded.payload == "payload"
        assert loaded.created_on == row.created_on
        assert loaded.expires_on == row.expires_on

    def test_update(self, repository: SessionRepository) -> None:
        """行を上書きできること"""
        session_id = uuid.uuid4()
        repository.insert(make_row(session_id, "first"))

        repository.update(make_row(session_id, "second"))

        assert repository.select(session_id).payload == "second"

    def test_select_not_found(self, repository: SessionRepository) -> None:
        """存在しない行はSessionNotFoundErrorとなること"""
        session_id = uuid.uuid4()

        with pytest.raises(SessionNotFoundError) as exc_info:
            repository.select(session_id)

        assert exc_info.value.session_id == str(session_id)

    def test_delete_is_idempotent(
        self, repository: SessionRepository, fake_db: FakeCassandraSession
    ) -> None:
        """削除後に再度削除してもエラーにならないこと"""
        session_id = uuid.uuid4()
        repository.insert(make_row(session_id))

        repository.delete(session_id)
        repository.delete(session_id)

        assert session_id not in fake_db.tables["sessions"]

    def test_driver_error_propagates(
        self, repository: SessionRepository, fake_db: FakeCassandraSession
    ) -> None:
        """ドライバの例外がそのまま伝播すること"""
        fake_db.errors["INSERT"] = RuntimeError("unavailable")

        with pytest.raises(RuntimeError):
            repository.insert(make_row(uuid.uuid4()))

    def test_ping(
        self, repository: SessionRepository, fake_db: FakeCassandraSession
    ) -> None:
        """接続確認クエリが実行され、バージョンが返ること"""
        assert repository.ping() == "4.1.0"

        assert fake_db.executed[-1][0] == "SELECT release_version FROM system.local"

    def test_close(
        self, repository: SessionRepository, fake_db: FakeCassandraSession
    ) -> None:
        """クラスタ停止の有無を選べること"""
        repository.close()
        assert fake_db.is_shutdown is True
        assert fake_db.cluster.is_shutdown is False

        repository.close(shutdown_cluster=True)
        assert fake_db.cluster.is_shutdown is True
