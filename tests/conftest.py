"""
pytest設定と共通フィクスチャ

Cassandraはインメモリのフェイクで置き換え、現在時刻はClockで制御する
"""

import os
from typing import Any, Generator

import pytest

from cassandra_sessions.core.config import get_settings
from cassandra_sessions.core.store_factory import new_cassandra_store_from_connection
from cassandra_sessions.core.time import utcnow
from cassandra_sessions.infrastructure.database.models import to_storage_precision
from cassandra_sessions.store import CassandraStore
from tests.fakes import FakeCassandraSession
from tests.helpers import BLOCK_KEY, HASH_KEY, MAX_AGE, Clock


def pytest_configure(config: Any) -> None:
    """
    pytest実行前の設定

    設定は初回のget_settings()で環境変数から読み込まれる
    """
    os.environ["ENV_MODE"] = "test"
    os.environ["SESSION_KEYS"] = "test-hash-key:test-block-key"
    os.environ["SESSION_COOKIE_NAME"] = "session"


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """テストごとに設定キャッシュをクリア"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> Clock:
    """
    ストアが参照する現在時刻を固定

    CQLのtimestampと揃えるためミリ秒精度から開始する
    """
    fixed = Clock(to_storage_precision(utcnow()))
    monkeypatch.setattr("cassandra_sessions.store.utcnow", fixed)
    return fixed


@pytest.fixture
def fake_db() -> FakeCassandraSession:
    """インメモリのCassandraセッション"""
    return FakeCassandraSession()


@pytest.fixture
def store(fake_db: FakeCassandraSession, clock: Clock) -> CassandraStore:
    """
    フェイクのCassandraに接続したセッションストア

    Returns:
        CassandraStore
    """
    return new_cassandra_store_from_connection(
        fake_db, "`sessions`", "/", MAX_AGE, HASH_KEY, BLOCK_KEY
    )
