from .case import camel_case, kebab_case, words
from .hashing import sha256_hash, url_key
from .redact import redact

__all__ = [
    "camel_case",
    "kebab_case",
    "words",
    "sha256_hash",
    "url_key",
    "redact",
]
