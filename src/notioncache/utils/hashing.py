"""Hash helpers for cache keys.

:func:`url_key` derives the stable lookup key under which a mirrored file
is recorded.  Notion-hosted file URLs carry a short-lived signature in the
query string, so the key is computed from the URL with its query string
and fragment removed: the same underlying file always maps to the same
key, however many times its signed URL rotates.
"""

from __future__ import annotations

import hashlib
from urllib.parse import urlsplit, urlunsplit


def sha256_hash(data: str) -> str:
    """Return the hex-encoded SHA-256 digest of *data* (UTF-8 encoded).

    Examples
    --------
    >>> sha256_hash("hello")[:16]
    '2cf24dba5fb0a30e'
    """
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def url_key(url: str) -> str:
    """Return the lookup key for a remote file URL.

    Scheme and host are lower-cased; query string and fragment are dropped.

    Examples
    --------
    >>> url_key("https://s3.aws.com/a/b.png?X-Amz-Signature=1") == url_key(
    ...     "https://S3.aws.com/a/b.png?X-Amz-Signature=2")
    True
    """
    parts = urlsplit(url)
    stable = urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path, "", ""))
    return sha256_hash(stable)
