"""Async HTTP transport for the Notion API.

:class:`NotionTransport` handles the full request lifecycle:

1. Acquire a token-bucket slot (wait if needed).
2. Send the HTTP request with auth and version headers.
3. On ``2xx`` -- return the parsed JSON response.
4. On ``429`` -- honour ``Retry-After``, back off, and retry.
5. On ``5xx`` / network error -- exponential backoff and retry.
6. On non-retryable ``4xx`` -- raise the appropriate typed error immediately.
7. On max attempts exceeded -- raise :class:`NotioncacheRetryExhaustedError`,
   caused by a :class:`NotioncacheRateLimitError` when the last answer was 429.

List endpoints are walked with :meth:`NotionTransport.iter_pages`.  Each
page is fetched through :meth:`NotionTransport.request`, so retries happen
*inside* a page fetch and the pagination cursor is never lost to a 429.
"""

from __future__ import annotations

import asyncio
import json as _json
import sys
import time
from collections.abc import AsyncIterator
from typing import Any

import httpx

from notioncache.config import NotioncacheConfig
from notioncache.errors import (
    NotioncacheAuthError,
    NotioncacheNetworkError,
    NotioncacheNotFoundError,
    NotioncachePermissionError,
    NotioncacheRateLimitError,
    NotioncacheRetryExhaustedError,
    NotioncacheValidationError,
)
from notioncache.observability import NoopMetricsHook, get_logger
from notioncache.utils.redact import redact

from .rate_limit import AsyncTokenBucket
from .retries import RETRYABLE_STATUSES, compute_backoff, parse_retry_after, should_retry

log = get_logger("notioncache.transport")

PAGE_SIZE = 100
"""Largest ``page_size`` accepted by Notion list endpoints."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the :class:`NotioncacheError` subclass for a non-retryable 4xx."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    notion_message = body.get("message", response.text[:500])
    notion_code = body.get("code", "")
    context: dict[str, Any] = {"status_code": status, "notion_code": notion_code}

    if status == 401:
        raise NotioncacheAuthError(
            message=f"Authentication failed on {method} {path}: {notion_message}",
            context=context,
        )
    if status == 403:
        raise NotioncachePermissionError(
            message=f"Permission denied on {method} {path}: {notion_message}",
            context={**context, "operation": f"{method} {path}"},
        )
    if status == 404:
        raise NotioncacheNotFoundError(
            message=f"Resource not found on {method} {path}: {notion_message}",
            context={**context, "path": path},
        )
    raise NotioncacheValidationError(
        message=f"Client error {status} on {method} {path}: {notion_message}",
        context={**context, "body": body},
    )


def _emit_debug_dump(
    config: NotioncacheConfig,
    method: str,
    response: httpx.Response,
    json_payload: Any,
) -> None:
    """Write a redacted dump of the request/response to stderr if enabled."""
    if not config.debug_dump_payload:
        return
    try:
        resp_body = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    dump: dict[str, Any] = {
        "method": method,
        "url": str(response.url),
        "response_status": response.status_code,
        "response_body": resp_body,
    }
    if json_payload is not None:
        dump["request_body"] = json_payload
    print(
        _json.dumps(redact(dump, config.token), indent=2, default=str),
        file=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class NotionTransport:
    """Asynchronous HTTP transport with auth, retry, and rate limiting.

    Parameters
    ----------
    config:
        A :class:`NotioncacheConfig` controlling all transport behaviour.
    client:
        Optional pre-built ``httpx.AsyncClient``.  Tests pass one backed by
        ``httpx.MockTransport``; it must already carry ``base_url``.
    """

    def __init__(
        self,
        config: NotioncacheConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._bucket = AsyncTokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        if client is None:
            client = httpx.AsyncClient(
                base_url=config.base_url,
                timeout=httpx.Timeout(config.timeout_seconds),
                proxy=config.http_proxy,
            )
        client.headers.update({
            "Authorization": f"Bearer {config.token}",
            "Notion-Version": config.notion_version,
            "Content-Type": "application/json",
        })
        self._client = client

    # -- request -----------------------------------------------------------

    def _network_failure_delay(
        self, method: str, path: str, exc: Exception, attempt: int,
    ) -> float:
        """Return the backoff after a network error, or raise if out of attempts."""
        self._metrics.increment(
            "notioncache.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if not should_retry(None, exc, attempt, self._config.retry_max_attempts):
            raise NotioncacheNetworkError(
                message=f"Network error on {method} {path}: {exc}",
                context={"url": path, "attempt": attempt + 1},
                cause=exc,
            ) from exc
        self._metrics.increment(
            "notioncache.retries_total",
            tags={"method": method, "path": path, "reason": "network_error"},
        )
        return compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
        )

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute an HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``...).
        path:
            API path relative to ``base_url`` (e.g. ``/pages/{id}``).
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.request` (``json=``,
            ``params=``...).

        Returns
        -------
        dict
            Parsed JSON response body (``{}`` for an empty body).

        Raises
        ------
        NotioncacheAuthError
            On 401 responses.
        NotioncachePermissionError
            On 403 responses.
        NotioncacheNotFoundError
            On 404 responses.
        NotioncacheValidationError
            On 400 and other non-retryable 4xx responses.
        NotioncacheRetryExhaustedError
            When every attempt got a retryable status.
        NotioncacheNetworkError
            On transport-level failures after exhausting retries.
        """
        max_attempts = self._config.retry_max_attempts
        last_status: int | None = None
        retry_after: float | None = None
        json_payload = kwargs.get("json")

        for attempt in range(max_attempts):
            wait = await self._bucket.acquire()
            if wait > 0:
                self._metrics.timing(
                    "notioncache.rate_limit_wait_ms",
                    wait * 1000,
                    tags={"method": method, "path": path},
                )

            t0 = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_status = None
                await asyncio.sleep(self._network_failure_delay(method, path, exc, attempt))
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            last_status = response.status_code
            tags = {"method": method, "path": path, "status": str(last_status)}
            self._metrics.increment("notioncache.requests_total", tags=tags)
            self._metrics.timing("notioncache.request_duration_ms", elapsed_ms, tags=tags)

            _emit_debug_dump(self._config, method, response, json_payload)

            if 200 <= last_status < 300:
                if last_status == 204 or not response.content:
                    return {}
                result: dict = response.json()
                return result

            if last_status not in RETRYABLE_STATUSES:
                _raise_for_status(response, method, path)

            retry_after = parse_retry_after(response) if last_status == 429 else None
            if not should_retry(last_status, None, attempt, max_attempts):
                break

            reason = "server_error"
            if last_status == 429:
                reason = "rate_limited"
                self._metrics.increment(
                    "notioncache.rate_limited_total",
                    tags={"method": method, "path": path},
                )
                log.warning(
                    "Rate limited by Notion API",
                    extra={
                        "extra_fields": {
                            "op": "request",
                            "method": method,
                            "path": path,
                            "status_code": 429,
                            "retry_after": retry_after,
                            "attempt": attempt + 1,
                        }
                    },
                )

            delay = compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
                retry_after=retry_after,
            )
            self._metrics.increment(
                "notioncache.retries_total",
                tags={"method": method, "path": path, "reason": reason},
            )
            await asyncio.sleep(delay)

        cause: Exception | None = None
        if last_status == 429:
            cause = NotioncacheRateLimitError(
                message=f"Rate limited on {method} {path}",
                context={"retry_after_seconds": retry_after, "attempt": max_attempts},
            )
        raise NotioncacheRetryExhaustedError(
            message=(
                f"All {max_attempts} attempts exhausted for {method} {path} "
                f"(last status: {last_status})"
            ),
            context={"attempts": max_attempts, "last_status_code": last_status},
            cause=cause,
        )

    # -- pagination --------------------------------------------------------

    async def iter_pages(self, method: str, path: str, **kwargs: Any) -> AsyncIterator[dict]:
        """Walk a cursor-paginated list endpoint, yielding each raw page.

        The first request carries no cursor; subsequent requests carry the
        previous page's ``next_cursor`` until ``has_more`` is false.  For
        ``POST`` endpoints the cursor travels in the JSON body, otherwise in
        the query string.
        """
        location = "json" if method.upper() in ("POST", "PATCH") else "params"
        base: dict = dict(kwargs.pop(location, None) or {})
        cursor: str | None = None

        while True:
            body = {**base, "page_size": PAGE_SIZE}
            if cursor is not None:
                body["start_cursor"] = cursor
            data = await self.request(method, path, **{location: body}, **kwargs)
            yield data

            if not data.get("has_more", False):
                break
            cursor = data.get("next_cursor")
            if cursor is None:
                break

    async def paginate(self, method: str, path: str, **kwargs: Any) -> AsyncIterator[dict]:
        """Like :meth:`iter_pages` but yields the individual ``results`` items."""
        async for page in self.iter_pages(method, path, **kwargs):
            for item in page.get("results", []):
                yield item

    # -- lifecycle ---------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> NotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
