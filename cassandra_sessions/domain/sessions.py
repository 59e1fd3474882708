"""
セッションの基本型

- Options: クッキー属性
- Session: 1リクエスト内で扱う名前付きセッション
- Registry: リクエスト単位でセッションを名前ごとに1つに保つキャッシュ
- SessionStore: ストアが実装するインターフェース（get/new/save/delete）
"""

from dataclasses import dataclass, replace
from typing import Any, Literal, Optional, Protocol

FLASHES_KEY = "_flash"

REGISTRY_STATE_KEY = "session_registry"


@dataclass
class Options:
    """
    クッキー属性

    Attributes:
        path: Path属性
        domain: Domain属性
        max_age: Max-Age（秒）。0は属性なし、負数は即時削除
        secure: Secure属性
        http_only: HttpOnly属性
        same_site: SameSite属性
    """

    path: str = "/"
    domain: Optional[str] = None
    max_age: int = 86400 * 30
    secure: bool = False
    http_only: bool = False
    same_site: Optional[Literal["lax", "strict", "none"]] = "lax"

    def copy(self) -> "Options":
        return replace(self)


class SessionStore(Protocol):
    """セッションストアのインターフェース"""

    def get(
        self, request: Any, name: str
    ) -> tuple["Session", Optional[Exception]]: ...

    def new(
        self, request: Any, name: str
    ) -> tuple["Session", Optional[Exception]]: ...

    def save(self, request: Any, response: Any, session: "Session") -> None: ...

    def delete(self, request: Any, response: Any, session: "Session") -> None: ...


class Session:
    """
    名前付きセッション

    Attributes:
        id: セッションID（保存前は空文字）
        values: セッション値
        options: クッキー属性（セッションごとのコピー）
        is_new: 新規セッションかどうか
    """

    def __init__(self, store: SessionStore, name: str) -> None:
        self.id = ""
        self.values: dict[str, Any] = {}
        self.options = Options()
        self.is_new = True
        self._store = store
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> SessionStore:
        return self._store

    def add_flash(self, value: Any, key: str = FLASHES_KEY) -> None:
        """フラッシュメッセージを追加"""
        self.values.setdefault(key, []).append(value)

    def flashes(self, key: str = FLASHES_KEY) -> list[Any]:
        """フラッシュメッセージを取り出す（取り出したものは削除される）"""
        return self.values.pop(key, None) or []

    def save(self, request: Any, response: Any) -> None:
        """ストア経由で保存"""
        self._store.save(request, response, self)

    def __repr__(self) -> str:
        return f"<Session(name={self._name}, id={self.id}, is_new={self.is_new})>"


class Registry:
    """
    リクエスト単位のセッションキャッシュ

    同じリクエスト内で同名のセッションを取得すると同じインスタンスを返す
    """

    def __init__(self, request: Any) -> None:
        self.request = request
        self._sessions: dict[str, tuple[Session, Optional[Exception]]] = {}

    def get(self, store: SessionStore, name: str) -> tuple[Session, Optional[Exception]]:
        """
        セッションを取得（初回はstore.newで生成）

        Returns:
            (session, error) のタプル。errorはクッキーのデコードエラー
        """
        if name not in self._sessions:
            self._sessions[name] = store.new(self.request, name)
        return self._sessions[name]

    def save_all(self, response: Any) -> None:
        """このリクエストで取得した全セッションを保存"""
        for session, _ in self._sessions.values():
            session.save(self.request, response)


def get_registry(request: Any) -> Registry:
    """
    リクエストに紐づくRegistryを取得（なければ作成）

    Args:
        request: Starlette/FastAPIのRequest
    """
    registry = getattr(request.state, REGISTRY_STATE_KEY, None)
    if registry is None:
        registry = Registry(request)
        setattr(request.state, REGISTRY_STATE_KEY, registry)
    return registry
