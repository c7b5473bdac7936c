"""Metrics hook protocol and no-op default implementation.

notioncache emits counters and timings around remote requests, block
mapping, file mirroring and sync runs.  By default a
:class:`NoopMetricsHook` is used so there is zero overhead; any object that
satisfies :class:`MetricsHook` can be passed as ``NotioncacheConfig.metrics``
to route them to StatsD, Prometheus or similar.

Emitted metric names:

* ``notioncache.requests_total``          -- counter
* ``notioncache.retries_total``           -- counter
* ``notioncache.rate_limited_total``      -- counter
* ``notioncache.request_duration_ms``     -- timing
* ``notioncache.rate_limit_wait_ms``      -- timing
* ``notioncache.blocks_dropped_total``    -- counter
* ``notioncache.files_cached_total``      -- counter
* ``notioncache.sync_duration_ms``        -- timing
* ``notioncache.database_documents``      -- gauge (documents per database after a sync)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
