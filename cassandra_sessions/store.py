"""
Cassandraバックエンドのセッションストア

- 新規セッションの保存時にUUIDを発行し、署名付きクッキーで行と結びつける
- 読み込み経路のエラー（署名不正・行なし・期限切れ）は新規セッションに縮退する
- 書き込み経路のエラーは呼び出し元へ伝播する
- created_on / modified_on / expires_on はカラムに保存し、値マップには
  デコード後にのみ注入する（エンコードする値には含めない）
"""

from datetime import datetime
from typing import Any, MutableMapping, Optional, Sequence

from fastapi import Request, Response

from .core.cookies import clear_session_cookie, set_session_cookie
from .core.logging import get_logger
from .core.time import seconds_from_now, utcnow
from .domain.exceptions import CodecError, SessionExpiredError
from .domain.sessions import Options, Session, get_registry
from .infrastructure.database.models import (
    CREATED_ON,
    EXPIRES_ON,
    SessionRow,
    coerce_timestamp,
    new_session_id,
    parse_session_id,
    without_reserved,
)
from .infrastructure.repositories import SessionRepository
from .infrastructure.security import (
    Codec,
    decode_multi,
    encode_multi,
    set_codecs_max_age,
)

logger = get_logger(__name__)


class CassandraStore:
    """
    セッションストア

    ストアはリクエスト間で共有される。セッションはリクエストごとに生成され、
    デフォルトのOptionsはセッションごとにコピーされる。

    Attributes:
        repository: セッション行リポジトリ
        codecs: コーデックチェーン
        options: デフォルトのクッキー属性
    """

    def __init__(
        self,
        repository: SessionRepository,
        codecs: Sequence[Codec],
        options: Options,
        owns_connection: bool = False,
    ) -> None:
        """
        Args:
            repository: セッション行リポジトリ
            codecs: コーデックチェーン（先頭がエンコードに使われる）
            options: デフォルトのクッキー属性
            owns_connection: close()でクラスタも停止する場合True
        """
        self.repository = repository
        self.codecs = list(codecs)
        self.options = options
        self._owns_connection = owns_connection

    def close(self) -> None:
        """接続を閉じる"""
        self.repository.close(shutdown_cluster=self._owns_connection)

    def set_max_age(self, age: int) -> None:
        """
        デフォルトのMax-Ageとコーデックのトークン有効期限を変更

        Args:
            age: 秒数
        """
        self.options.max_age = age
        set_codecs_max_age(self.codecs, age)

    def get(self, request: Request, name: str) -> tuple[Session, Optional[Exception]]:
        """
        リクエスト内で名前ごとに1つのセッションを返す

        Returns:
            (session, error) のタプル
        """
        return get_registry(request).get(self, name)

    def new(self, request: Request, name: str) -> tuple[Session, Optional[Exception]]:
        """
        セッションを生成し、クッキーがあればストレージから読み込む

        クッキーのデコードに失敗した場合はエラーを新規セッションと共に返す。
        読み込みの失敗（行なし・期限切れ・ペイロードの検証失敗・ストレージエラー）は
        握りつぶし、新規セッションを返す。

        Returns:
            (session, error) のタプル。errorはクッキーのデコードエラー
        """
        session = Session(self, name)
        session.options = self.options.copy()
        session.is_new = True

        cookie = request.cookies.get(name)
        if cookie is None:
            return session, None

        try:
            session_id = decode_multi(name, cookie, self.codecs)
        except CodecError as e:
            logger.warning(f"Failed to decode session cookie {name!r}: {e}")
            return session, e

        session.id = session_id
        try:
            self.load(session)
        except Exception as e:
            logger.warning(f"Failed to load session {session_id}: {e}")
            session.id = ""
            session.values = {}
        else:
            session.is_new = False

        return session, None

    def save(self, request: Request, response: Response, session: Session) -> None:
        """
        セッションを保存してクッキーを発行

        ストレージへの書き込みが成功した場合のみレスポンスを変更する

        Raises:
            CodecError: エンコードに失敗した場合
            SessionValueError: 予約キーの値が不正な場合
            cassandra.DriverException: ストレージエラー
        """
        if not session.id:
            self.insert(session)
        else:
            self.update(session)

        encoded = encode_multi(session.name, session.id, self.codecs)
        set_session_cookie(response, session.name, encoded, session.options)

    def delete(self, request: Request, response: Response, session: Session) -> None:
        """
        クッキーを無効化し、値を消去して行を削除

        Raises:
            cassandra.DriverException: ストレージエラー
        """
        clear_session_cookie(response, session.name, session.options)
        session.values.clear()

        # 未保存のセッションには行が存在しない
        if not session.id:
            return
        self.repository.delete(parse_session_id(session.id))

    def insert(self, session: Session) -> None:
        """新しいIDで行を挿入"""
        now = utcnow()
        created_on = self._timestamp(session.values, CREATED_ON, now)
        modified_on = created_on
        expires_on = self._timestamp(
            session.values, EXPIRES_ON, seconds_from_now(session.options.max_age, now)
        )

        encoded = encode_multi(
            session.name, without_reserved(session.values), self.codecs
        )

        row = SessionRow.build(
            new_session_id(), encoded, created_on, modified_on, expires_on
        )
        self.repository.insert(row)

        session.id = str(row.id)
        session.is_new = False
        row.inject_timestamps(session.values)

    def update(self, session: Session) -> None:
        """
        既存の行を上書き

        新規セッションの場合は挿入に委譲する。
        有効期限は少なくとも現在時刻+max_ageまで延長される。
        """
        if session.is_new:
            self.insert(session)
            return

        now = utcnow()
        created_on = self._timestamp(session.values, CREATED_ON, now)
        # 更新時もmodified_onはcreated_onと同じ値を保存する
        modified_on = created_on
        min_expires_on = seconds_from_now(session.options.max_age, now)
        expires_on = self._timestamp(session.values, EXPIRES_ON, min_expires_on)
        if expires_on < min_expires_on:
            expires_on = min_expires_on

        encoded = encode_multi(
            session.name, without_reserved(session.values), self.codecs
        )

        row = SessionRow.build(
            parse_session_id(session.id), encoded, created_on, modified_on, expires_on
        )
        self.repository.update(row)
        row.inject_timestamps(session.values)

    def load(self, session: Session) -> None:
        """
        ストレージから値を読み込む

        Raises:
            SessionNotFoundError: 行が存在しない場合
            SessionExpiredError: 期限切れの場合
            CodecError: ペイロードの検証に失敗した場合
        """
        row = self.repository.select(parse_session_id(session.id))

        now = utcnow()
        if row.expires_on <= now:
            logger.info(f"Session expired on {row.expires_on}, but it is {now} now.")
            raise SessionExpiredError(session.id, row.expires_on)

        values = decode_multi(session.name, row.payload, self.codecs)
        if not isinstance(values, dict):
            raise CodecError("Session payload is not a mapping")

        session.values = values
        row.inject_timestamps(session.values)

    @staticmethod
    def _timestamp(
        values: MutableMapping[str, Any], key: str, default: datetime
    ) -> datetime:
        value = values.get(key)
        if value is None:
            return default
        return coerce_timestamp(key, value)
