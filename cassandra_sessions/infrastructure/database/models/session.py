"""
セッション行モデル

メモリ上のセッション（ID、値、タイムスタンプ）と
永続化される行（id, session_data, created_on, modified_on, expires_on）の相互変換
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, MutableMapping

from ....domain.exceptions import InvalidSessionIdError, SessionValueError

CREATED_ON = "created_on"
MODIFIED_ON = "modified_on"
EXPIRES_ON = "expires_on"

# 値マップ上では永続化境界をまたがない予約キー
RESERVED_KEYS = (CREATED_ON, MODIFIED_ON, EXPIRES_ON)


def as_utc(value: datetime) -> datetime:
    """
    タイムゾーン付きUTCに変換

    Cassandraドライバはnaive（UTC）のdatetimeを返すため、UTCとして扱う
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage_precision(value: datetime) -> datetime:
    """CQLのtimestamp型はミリ秒精度"""
    value = as_utc(value)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def coerce_timestamp(key: str, value: Any) -> datetime:
    """
    予約キーの値をタイムスタンプとして解釈

    Args:
        key: キー名（エラー報告用）
        value: datetime、ISO 8601文字列、またはエポック秒

    Returns:
        タイムゾーン付きUTCのdatetime

    Raises:
        SessionValueError: タイムスタンプとして解釈できない場合
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str):
        try:
            return as_utc(datetime.fromisoformat(value))
        except ValueError as e:
            raise SessionValueError(key, value) from e
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    raise SessionValueError(key, value)


def without_reserved(values: Mapping[str, Any]) -> dict[str, Any]:
    """予約キーを除いた値マップのコピー"""
    return {key: value for key, value in values.items() if key not in RESERVED_KEYS}


def new_session_id() -> uuid.UUID:
    """ランダムなUUID（version 4）を生成"""
    return uuid.uuid4()


def parse_session_id(session_id: Any) -> uuid.UUID:
    """
    正規形式のセッションID文字列をUUIDに変換

    Raises:
        InvalidSessionIdError: UUIDとして不正な場合
    """
    if not isinstance(session_id, str):
        raise InvalidSessionIdError(repr(session_id))
    try:
        return uuid.UUID(session_id)
    except ValueError as e:
        raise InvalidSessionIdError(session_id) from e


@dataclass
class SessionRow:
    """
    セッション行

    Attributes:
        id: セッションID（主キー）
        session_data: エンコード済みのセッション値
        created_on: 作成日時
        modified_on: 更新日時
        expires_on: 有効期限
    """

    id: uuid.UUID
    session_data: bytes
    created_on: datetime
    modified_on: datetime
    expires_on: datetime

    @classmethod
    def from_db(cls, row: Any) -> "SessionRow":
        """ドライバの行オブジェクトから生成"""
        return cls(
            id=row.id,
            session_data=bytes(row.session_data or b""),
            created_on=as_utc(row.created_on),
            modified_on=as_utc(row.modified_on),
            expires_on=as_utc(row.expires_on),
        )

    @classmethod
    def build(
        cls,
        session_id: uuid.UUID,
        encoded: str,
        created_on: datetime,
        modified_on: datetime,
        expires_on: datetime,
    ) -> "SessionRow":
        """エンコード済みの値とタイムスタンプから書き込み用の行を生成"""
        return cls(
            id=session_id,
            session_data=encoded.encode("utf-8"),
            created_on=to_storage_precision(created_on),
            modified_on=to_storage_precision(modified_on),
            expires_on=to_storage_precision(expires_on),
        )

    @property
    def payload(self) -> str:
        return self.session_data.decode("utf-8")

    def to_insert_params(self) -> tuple[Any, ...]:
        # (id, session_data, created_on, modified_on, expires_on)
        return (
            self.id,
            self.session_data,
            self.created_on,
            self.modified_on,
            self.expires_on,
        )

    def to_update_params(self) -> tuple[Any, ...]:
        # SET session_data, created_on, expires_on, modified_on WHERE id
        return (
            self.session_data,
            self.created_on,
            self.expires_on,
            self.modified_on,
            self.id,
        )

    def inject_timestamps(self, values: MutableMapping[str, Any]) -> None:
        """行のタイムスタンプを値マップに戻す"""
        values[CREATED_ON] = self.created_on
        values[MODIFIED_ON] = self.modified_on
        values[EXPIRES_ON] = self.expires_on

    def __repr__(self) -> str:
        return f"<SessionRow(id={self.id}, expires_on={self.expires_on})>"
