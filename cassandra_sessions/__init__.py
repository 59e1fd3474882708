"""Cassandra backed server-side sessions for FastAPI/Starlette"""

from .core.store_factory import (
    create_store_from_settings,
    new_cassandra_store,
    new_cassandra_store_from_connection,
)
from .domain.sessions import Options, Registry, Session, get_registry
from .infrastructure.security import SecureCookieCodec, codecs_from_pairs, register_type
from .store import CassandraStore

__all__ = [
    "CassandraStore",
    "Options",
    "Registry",
    "SecureCookieCodec",
    "Session",
    "codecs_from_pairs",
    "create_store_from_settings",
    "get_registry",
    "new_cassandra_store",
    "new_cassandra_store_from_connection",
    "register_type",
]
