import re
from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import get_logger

logger = get_logger(__name__)

# keyspace修飾（keyspace.table）も許可する
TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class Settings(BaseSettings):
    """
    セッションストア設定
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # 未定義のフィールドを無視
    )

    ENV_MODE: Literal["development", "production", "test"] = "development"

    CASSANDRA_HOSTS: str = "127.0.0.1"
    CASSANDRA_PORT: int = 9042
    CASSANDRA_KEYSPACE: str = "sessions"
    CASSANDRA_USERNAME: str = ""
    CASSANDRA_PASSWORD: str = ""

    @property
    def cassandra_hosts(self) -> list[str]:
        """コンタクトポイント一覧"""
        return [h.strip() for h in self.CASSANDRA_HOSTS.split(",") if h.strip()]

    @property
    def has_cassandra_auth(self) -> bool:
        """認証情報の有無"""
        return bool(self.CASSANDRA_USERNAME and self.CASSANDRA_PASSWORD)

    SESSION_TABLE: str = "sessions"

    @field_validator("SESSION_TABLE")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """テーブル名検証（バッククォートは除去）"""
        name = v.strip("`")
        if not TABLE_NAME_PATTERN.match(name):
            raise ValueError(f"Invalid SESSION_TABLE: {v!r}")
        return name

    SESSION_COOKIE_NAME: str = "session"
    SESSION_COOKIE_PATH: str = "/"
    SESSION_COOKIE_DOMAIN: Optional[str] = None
    SESSION_MAX_AGE: int = 86400 * 30  # 30 days
    SESSION_HTTP_ONLY: bool = True
    SESSION_SECURE: Optional[bool] = None

    # "hash[:block]" をカンマ区切りで指定（先頭が最新のキー）
    SESSION_KEYS: str = ""

    @field_validator("SESSION_KEYS")
    @classmethod
    def validate_session_keys(cls, v: str) -> str:
        """キー設定検証"""
        if not v:
            logger.warning("SESSION_KEYS is not set. Cookies cannot be signed.")
            return ""
        for entry in v.split(","):
            hash_key, _, _ = entry.strip().partition(":")
            if not hash_key:
                raise ValueError(
                    "Invalid SESSION_KEYS format. Expected comma-separated 'hash[:block]' entries"
                )
        return v

    @property
    def session_key_pairs(self) -> list[Optional[bytes]]:
        """
        キーペア（hash, block, hash, block, ...）

        blockキーが省略されたエントリはNoneとなる（署名のみ）
        """
        pairs: list[Optional[bytes]] = []
        for entry in self.SESSION_KEYS.split(","):
            entry = entry.strip()
            if not entry:
                continue
            hash_key, _, block_key = entry.partition(":")
            pairs.append(hash_key.encode("utf-8"))
            pairs.append(block_key.encode("utf-8") if block_key else None)
        return pairs

    @property
    def session_secure(self) -> bool:
        """Secure属性（未指定時は本番環境のみ有効）"""
        if self.SESSION_SECURE is None:
            return self.is_production
        return self.SESSION_SECURE

    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 1.0

    @field_validator("SENTRY_DSN")
    @classmethod
    def sentry_dsn_can_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        return v

    @model_validator(mode="after")
    def require_session_keys_in_production(self) -> "Settings":
        """本番環境では署名キーを必須とする"""
        if self.is_production and not self.session_key_pairs:
            raise ValueError("SESSION_KEYS is required in production")
        return self

    @property
    def is_development(self) -> bool:
        """開発環境かどうか"""
        return self.ENV_MODE == "development"

    @property
    def is_production(self) -> bool:
        """本番環境かどうか"""
        return self.ENV_MODE == "production"

    @property
    def is_test(self) -> bool:
        """テスト環境かどうか"""
        return self.ENV_MODE == "test"


@lru_cache
def get_settings() -> Settings:
    """
    設定を取得（キャッシュ）
    """
    return Settings()
