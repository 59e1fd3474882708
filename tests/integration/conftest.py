"""
統合テスト用フィクスチャ

フェイクのCassandraに接続したストアをアプリケーションに注入する
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from cassandra_sessions.core.app_factory import create_app
from cassandra_sessions.store import CassandraStore


@pytest.fixture
def client(store: CassandraStore) -> Generator[TestClient, None, None]:
    """
    テストクライアント

    Yields:
        TestClient
    """
    with TestClient(create_app(store)) as test_client:
        yield test_client
