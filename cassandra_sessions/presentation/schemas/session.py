"""セッションAPIのスキーマ定義"""

from typing import Any

from pydantic import BaseModel, Field


class SessionResponse(BaseModel):
    """
    セッション状態

    Attributes:
        is_new: 新規セッションかどうか
        values: セッション値（タイムスタンプを含む）
    """

    is_new: bool
    values: dict[str, Any] = Field(default_factory=dict)


class SessionUpdateRequest(BaseModel):
    """セッション値の更新（既存の値にマージされる）"""

    values: dict[str, Any]


class SessionDeletedResponse(BaseModel):
    status: str = "deleted"
