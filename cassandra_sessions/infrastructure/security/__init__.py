from .codecs import (
    Codec,
    SecureCookieCodec,
    codecs_from_pairs,
    decode_multi,
    encode_multi,
    set_codecs_max_age,
)
from .serializer import register_type

__all__ = [
    "Codec",
    "SecureCookieCodec",
    "codecs_from_pairs",
    "decode_multi",
    "encode_multi",
    "set_codecs_max_age",
    "register_type",
]
