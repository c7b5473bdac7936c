"""Configuration for notioncache.

:class:`NotioncacheConfig` is a plain dataclass that captures every tuneable
knob: the Notion transport (auth, retries, pacing), the local SQLite cache
and the on-disk file store.  Instances are consumed by the composition root
(:func:`notioncache.app.build_application`).

:meth:`NotioncacheConfig.from_env` builds a config from environment
variables.  The CLI loads a ``.env`` file with ``python-dotenv`` first, so
the same variables may live there.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

ENV_PREFIX = "NOTIONCACHE_"
"""Prefix for every environment variable read by :meth:`from_env`."""

# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class NotioncacheConfig:
    """Complete configuration for a notioncache deployment.

    Every parameter has a sensible default so that the only *required*
    value is ``token``.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
        Pinned to the release that exposes ``POST /databases/{id}/query``
        and the ``database`` search filter.
    base_url:
        API root URL.  Override for proxy or testing environments.
    retry_max_attempts:
        Maximum number of attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Scale backoff intervals randomly to 50-100 % of their value.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds, applied to every remote call.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~notioncache.observability.MetricsHook` backend.
    debug_dump_payload:
        Write the (redacted) Notion API payload to *stderr*.
    database_path:
        SQLite database file for the cache.  ``":memory:"`` keeps it in RAM.
    file_store_dir:
        Directory where mirrored files are written.
    file_public_base_url:
        URL prefix under which ``file_store_dir`` is served to readers.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 3.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    # ── Storage ─────────────────────────────────────────────────────────
    database_path: str = "notioncache.sqlite3"

    file_store_dir: str = "files"

    file_public_base_url: str = "/files"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if not self.database_path:
            raise ValueError("database_path must not be empty")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> NotioncacheConfig:
        """Build a config from environment variables.

        ``NOTION_API_KEY`` supplies the token.  Every other field is read
        from ``NOTIONCACHE_<FIELD_NAME>`` (upper-cased) when present and
        coerced to the field's default type.  ``metrics`` is not
        configurable from the environment.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {"token": env.get("NOTION_API_KEY", "")}
        for f in dataclasses.fields(cls):
            if f.name in ("token", "metrics"):
                continue
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            kwargs[f.name] = _coerce(raw, f.default)
        return cls(**kwargs)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotioncacheConfig({', '.join(parts)})"


def _coerce(raw: str, default: Any) -> Any:
    """Convert an environment string to the type of *default*."""
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw
