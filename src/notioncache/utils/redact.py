"""Payload redaction for safe debug dumps.

Before a Notion API request or response is written to *stderr* the
:func:`redact` function must be applied.  It enforces the following rules:

* Values under sensitive keys (``authorization``, ``token``, ``secret``...)
  are masked, keeping only the last four characters of a known token.
* The integration token is scrubbed from every string in the tree.
* Signed file URLs (Notion-hosted files carry an expiring AWS signature in
  the query string) have their query string replaced with
  ``?<signed>`` so dumps never contain a usable download link.
"""

from __future__ import annotations

import copy
import re
from typing import Any

_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "authorization",
    "cookie",
    "api_key",
})

_SIGNED_URL_RE = re.compile(
    r"(https?://[^\s?\"']+)\?[^\s\"']*(?:X-Amz-Signature|Signature)=[^\s\"']*",
    re.IGNORECASE,
)

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")


def _mask_token(value: str, token: str | None) -> str:
    if token and token in value:
        suffix = token[-4:] if len(token) >= 4 else "****"
        placeholder = f"<redacted:...{suffix}>"
        if token in placeholder:
            placeholder = "<redacted>"
        value = value.replace(token, placeholder)
    return _BEARER_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, token)
    if isinstance(value, list):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        value = _SIGNED_URL_RE.sub(lambda m: f"{m.group(1)}?<signed>", value)
        return _mask_token(value, token)
    return value


def _redact_dict(d: dict, token: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            result[key] = _mask_token(value, token) if isinstance(value, str) else "<redacted>"
        else:
            result[key] = _redact_value(value, token)
    return result


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a deep copy of *payload* with secrets and signatures removed.

    The original *payload* is never mutated.

    Examples
    --------
    >>> redact({"Authorization": "Bearer secret_abc123"})
    {'Authorization': 'Bearer <redacted>'}
    """
    return _redact_dict(copy.deepcopy(payload), token)
