"""
署名付き（オプションで暗号化）クッキーコーデック

- hashキー: HMAC-SHA256による署名（itsdangerous、タイムスタンプ付き）
- blockキー: Fernetによる暗号化（cryptography）、キーはHKDFで導出
- 名前（クッキー名）をsaltとして使い、別名の値への流用を防ぐ

コーデックチェーンは先頭でエンコードし、デコードは順に試行する。
先頭に新しいキーを追加することでキーローテーションを行う。
"""

import base64
import hashlib
from typing import Any, Optional, Protocol, Sequence

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from itsdangerous import BadData, BadSignature, SignatureExpired, TimestampSigner
from itsdangerous.encoding import base64_decode, base64_encode

from ...domain.exceptions import CodecError, CookieDecodeError
from . import serializer

DEFAULT_MAX_AGE = 86400 * 30  # 30 days

BLOCK_KEY_INFO = b"cassandra-sessions block key"


class Codec(Protocol):
    """エンコード/デコードのインターフェース"""

    def encode(self, name: str, value: Any) -> str: ...

    def decode(self, name: str, token: str) -> Any: ...


def derive_fernet_key(block_key: bytes) -> bytes:
    """
    任意長のblockキーからFernetキーを導出

    Args:
        block_key: blockキー

    Returns:
        URL-safe Base64エンコードされた32バイトのキー
    """
    hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=BLOCK_KEY_INFO)
    return base64.urlsafe_b64encode(hkdf.derive(block_key))


class SecureCookieCodec:
    """
    署名付きクッキーコーデック

    Attributes:
        hash_key: 署名キー
        max_age: トークンの最大有効秒数（0以下で無効化）
        cipher: 暗号化インスタンス（blockキー未指定時はNone）
    """

    def __init__(
        self,
        hash_key: bytes,
        block_key: Optional[bytes] = None,
        max_age: int = DEFAULT_MAX_AGE,
    ) -> None:
        """
        Args:
            hash_key: 署名キー（必須）
            block_key: 暗号化キー（Noneの場合は署名のみ）
            max_age: トークンの最大有効秒数
        """
        if not hash_key:
            raise CodecError("Hash key is not set")
        self.hash_key = hash_key
        self.max_age = max_age
        self.cipher = Fernet(derive_fernet_key(block_key)) if block_key else None

    def _signer(self, name: str) -> TimestampSigner:
        return TimestampSigner(self.hash_key, salt=name, digest_method=hashlib.sha256)

    def encode(self, name: str, value: Any) -> str:
        """
        値をシリアライズ→（暗号化）→署名してトークンに変換

        Raises:
            CodecError: シリアライズに失敗した場合
        """
        try:
            raw = serializer.dumps(value).encode("utf-8")
        except TypeError as e:
            raise CodecError(f"The value could not be serialized: {e}") from e

        if self.cipher is not None:
            # Fernetトークンのパディングはクッキーで使えないため除去
            payload = self.cipher.encrypt(raw).rstrip(b"=")
        else:
            payload = base64_encode(raw)

        return self._signer(name).sign(payload).decode("ascii")

    def decode(self, name: str, token: str) -> Any:
        """
        トークンを検証→（復号化）→デシリアライズ

        Raises:
            CodecError: 署名不正・期限切れ・復号化失敗・デシリアライズ失敗
        """
        max_age = self.max_age if self.max_age > 0 else None
        try:
            payload = self._signer(name).unsign(token, max_age=max_age)
        except SignatureExpired as e:
            raise CodecError("The value has an expired timestamp") from e
        except BadSignature as e:
            raise CodecError("The value is not valid") from e

        if self.cipher is not None:
            try:
                raw = self.cipher.decrypt(payload + b"=" * (-len(payload) % 4))
            except InvalidToken as e:
                raise CodecError("The value could not be decrypted") from e
        else:
            try:
                raw = base64_decode(payload)
            except BadData as e:
                raise CodecError("The value could not be decoded") from e

        try:
            return serializer.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise CodecError("The value could not be deserialized") from e


def codecs_from_pairs(*key_pairs: Optional[bytes]) -> list[SecureCookieCodec]:
    """
    hash/blockキーの交互の並びからコーデックチェーンを生成

    末尾のblockキーは省略可能（署名のみ）

    Args:
        key_pairs: hash, block, hash, block, ...

    Returns:
        コーデックのリスト（先頭がエンコードに使われる）
    """
    codecs: list[SecureCookieCodec] = []
    for i in range(0, len(key_pairs), 2):
        hash_key = key_pairs[i]
        block_key = key_pairs[i + 1] if i + 1 < len(key_pairs) else None
        if hash_key is None:
            raise CodecError(f"Hash key at position {i} is not set")
        codecs.append(SecureCookieCodec(hash_key, block_key))
    return codecs


def set_codecs_max_age(codecs: Sequence[Codec], max_age: int) -> None:
    """全コーデックのトークン有効期限を更新"""
    for codec in codecs:
        if isinstance(codec, SecureCookieCodec):
            codec.max_age = max_age


def encode_multi(name: str, value: Any, codecs: Sequence[Codec]) -> str:
    """
    チェーンの先頭のコーデックでエンコード

    Raises:
        CodecError: コーデック未設定、またはエンコード失敗
    """
    if not codecs:
        raise CodecError("No codecs were provided")
    return codecs[0].encode(name, value)


def decode_multi(name: str, token: str, codecs: Sequence[Codec]) -> Any:
    """
    各コーデックで順にデコードを試行し、最初に検証できた値を返す

    Raises:
        CodecError: コーデック未設定
        CookieDecodeError: いずれのコーデックでも検証できなかった場合
    """
    if not codecs:
        raise CodecError("No codecs were provided")

    errors: list[Exception] = []
    for codec in codecs:
        try:
            return codec.decode(name, token)
        except CodecError as e:
            errors.append(e)
    raise CookieDecodeError(name, errors)
