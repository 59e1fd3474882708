"""
セッション行モデルの単体テスト
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from cassandra_sessions.domain.exceptions import InvalidSessionIdError, SessionValueError
from cassandra_sessions.infrastructure.database.models import (
    RESERVED_KEYS,
    SessionRow,
    as_utc,
    coerce_timestamp,
    new_session_id,
    parse_session_id,
    to_storage_precision,
    without_reserved,
)
from tests.fakes import FakeRow

JST = timezone(timedelta(hours=9))


class TestTimestamps:
    """タイムスタンプ変換のテスト"""

    def test_as_utc_naive(self) -> None:
        """naiveなdatetimeはUTCとして扱われること"""
        value = as_utc(datetime(2024, 1, 1, 12, 0))

        assert value == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_as_utc_converts_timezone(self) -> None:
        """他のタイムゾーンはUTCに変換されること"""
        value = as_utc(datetime(2024, 1, 1, 21, 0, tzinfo=JST))

        assert value.tzinfo == timezone.utc
        assert value.hour == 12

    def test_storage_precision(self) -> None:
        """ミリ秒未満が切り捨てられること"""
        value = to_storage_precision(
            datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
        )

        assert value.microsecond == 123000

    @pytest.mark.parametrize(
        "value",
        [
            datetime(2024, 1, 1, tzinfo=timezone.utc),
            "2024-01-01T00:00:00+00:00",
            "2024-01-01T09:00:00+09:00",
            1704067200,
            1704067200.0,
        ],
    )
    def test_coerce_timestamp(self, value: object) -> None:
        """datetime・ISO文字列・エポック秒を解釈できること"""
        assert coerce_timestamp("created_on", value) == datetime(
            2024, 1, 1, tzinfo=timezone.utc
        )

    @pytest.mark.parametrize("value", ["yesterday", True, [2024], {"at": 1}])
    def test_coerce_timestamp_invalid(self, value: object) -> None:
        """タイムスタンプとして解釈できない値はSessionValueErrorとなること"""
        with pytest.raises(SessionValueError) as exc_info:
            coerce_timestamp("expires_on", value)

        assert exc_info.value.key == "expires_on"
        assert exc_info.value.code == "validation_error"


class TestSessionIds:
    """セッションIDのテスト"""

    def test_new_session_id(self) -> None:
        """version 4のUUIDが生成されること"""
        first = new_session_id()
        second = new_session_id()

        assert first.version == 4
        assert first != second

    def test_parse_canonical(self) -> None:
        """正規形式の文字列をUUIDに変換できること"""
        session_id = uuid.uuid4()

        assert parse_session_id(str(session_id)) == session_id

    @pytest.mark.parametrize("value", ["", "not-a-uuid", "1234", None, 42])
    def test_parse_invalid(self, value: object) -> None:
        """UUIDとして不正な値はInvalidSessionIdErrorとなること"""
        with pytest.raises(InvalidSessionIdError):
            parse_session_id(value)


class TestSessionRow:
    """SessionRowのテスト"""

    def make_row(self) -> SessionRow:
        now = datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
        return SessionRow.build(
            uuid.UUID("12345678-1234-5678-1234-567812345678"),
            "encoded-value",
            now,
            now,
            now + timedelta(hours=1),
        )

    def test_build(self) -> None:
        """書き込み用の行がミリ秒精度で生成されること"""
        row = self.make_row()

        assert row.session_data == b"encoded-value"
        assert row.payload == "encoded-value"
        assert row.created_on.microsecond == 123000
        assert row.expires_on - row.created_on == timedelta(hours=1)

    def test_insert_params_order(self) -> None:
        """INSERTのパラメータ順が列順と一致すること"""
        row = self.make_row()

        assert row.to_insert_params() == (
            row.id,
            row.session_data,
            row.created_on,
            row.modified_on,
            row.expires_on,
        )

    def test_update_params_order(self) -> None:
        """UPDATEのパラメータ順がSET句とWHERE句の順と一致すること"""
        row = self.make_row()

        assert row.to_update_params() == (
            row.session_data,
            row.created_on,
            row.expires_on,
            row.modified_on,
            row.id,
        )

    def test_from_db(self) -> None:
        """ドライバの行（naive UTC）から生成できること"""
        session_id = uuid.uuid4()
        db_row = FakeRow(
            session_id,
            b"data",
            datetime(2024, 1, 1),
            datetime(2024, 1, 2),
            datetime(2024, 1, 3),
        )

        row = SessionRow.from_db(db_row)

        assert row.id == session_id
        assert row.session_data == b"data"
        assert row.created_on == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert row.expires_on.tzinfo == timezone.utc

    def test_inject_timestamps(self) -> None:
        """予約キーに行のタイムスタンプが注入されること"""
        row = self.make_row()
        values: dict = {"user": "alice"}

        row.inject_timestamps(values)

        assert values["created_on"] == row.created_on
        assert values["modified_on"] == row.modified_on
        assert values["expires_on"] == row.expires_on
        assert values["user"] == "alice"

    def test_without_reserved(self) -> None:
        """予約キーを除いたコピーが返り、元の値マップは変更されないこと"""
        row = self.make_row()
        values: dict = {"user": "alice"}
        row.inject_timestamps(values)

        payload = without_reserved(values)

        assert payload == {"user": "alice"}
        assert not set(RESERVED_KEYS) & set(payload)
        assert values["created_on"] == row.created_on
