"""
セッション値のシリアライザ

JSONで表現できない型（datetime、UUIDなど）をタグ付きオブジェクトとして
埋め込み、往復変換で元の型を復元する。
型はプロセス全体のレジストリに登録する。モジュール読み込み時に
datetimeを含む標準的な型を登録済み。
"""

import base64
import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable
from uuid import UUID

TYPE_KEY = "__type__"
VALUE_KEY = "__value__"

# タグと同じ形のユーザー辞書は [key, value] の組のリストとして退避する
ESCAPED_DICT_TAG = "dict"


@dataclass(frozen=True)
class TypeTag:
    """
    登録済みの型

    Attributes:
        tag: シリアライズ時のタグ名
        cls: 対象の型
        to_json: 値をJSON表現に変換する関数
        from_json: JSON表現から値を復元する関数
    """

    tag: str
    cls: type
    to_json: Callable[[Any], Any]
    from_json: Callable[[Any], Any]


# 判定は登録順（datetimeはdateのサブクラスなので先に登録する）
_registry: list[TypeTag] = []
_registry_by_tag: dict[str, TypeTag] = {}


def register_type(
    tag: str,
    cls: type,
    to_json: Callable[[Any], Any],
    from_json: Callable[[Any], Any],
) -> None:
    """
    シリアライズ可能な型を登録

    同じタグで再登録した場合は上書きする。
    "dict" は予約済み。

    Args:
        tag: タグ名
        cls: 対象の型
        to_json: 値をJSON表現に変換する関数
        from_json: JSON表現から値を復元する関数

    Raises:
        ValueError: 予約済みのタグを指定した場合
    """
    if tag == ESCAPED_DICT_TAG:
        raise ValueError(f"Tag {tag!r} is reserved")
    entry = TypeTag(tag=tag, cls=cls, to_json=to_json, from_json=from_json)
    if tag in _registry_by_tag:
        _registry[_registry.index(_registry_by_tag[tag])] = entry
    else:
        _registry.append(entry)
    _registry_by_tag[tag] = entry


def registered_tags() -> list[str]:
    return [entry.tag for entry in _registry]


def _tag(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, dict):
        tagged: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Session keys must be strings, got {type(key).__name__}")
            tagged[key] = _tag(item)
        if _is_tagged(tagged):
            return {
                TYPE_KEY: ESCAPED_DICT_TAG,
                VALUE_KEY: [[key, item] for key, item in tagged.items()],
            }
        return tagged
    if isinstance(value, list):
        return [_tag(item) for item in value]
    for entry in _registry:
        if isinstance(value, entry.cls):
            return {TYPE_KEY: entry.tag, VALUE_KEY: _tag(entry.to_json(value))}
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def _is_tagged(obj: dict[str, Any]) -> bool:
    return len(obj) == 2 and TYPE_KEY in obj and VALUE_KEY in obj


def _untag(obj: dict[str, Any]) -> Any:
    if _is_tagged(obj):
        if obj[TYPE_KEY] == ESCAPED_DICT_TAG:
            return {key: item for key, item in obj[VALUE_KEY]}
        entry = _registry_by_tag.get(obj[TYPE_KEY])
        if entry is not None:
            return entry.from_json(obj[VALUE_KEY])
    return obj


def dumps(value: Any) -> str:
    """
    値をタグ付きJSON文字列に変換

    Raises:
        TypeError: 未登録の型が含まれる場合
    """
    return json.dumps(_tag(value), ensure_ascii=False, separators=(",", ":"))


def loads(data: str | bytes) -> Any:
    """
    タグ付きJSON文字列から値を復元

    Raises:
        ValueError: JSONとして不正な場合
    """
    return json.loads(data, object_hook=_untag)


register_type("datetime", datetime, lambda v: v.isoformat(), datetime.fromisoformat)
register_type("date", date, lambda v: v.isoformat(), date.fromisoformat)
register_type("uuid", UUID, str, UUID)
register_type(
    "bytes",
    bytes,
    lambda v: base64.b64encode(v).decode("ascii"),
    lambda v: base64.b64decode(v.encode("ascii")),
)
register_type("tuple", tuple, list, tuple)
register_type("set", set, list, set)
