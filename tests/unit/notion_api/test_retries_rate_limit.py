"""Unit tests for retries.py and rate_limit.py.

Targets:
  - retries.py:    parse_retry_after, should_retry, compute_backoff
  - rate_limit.py: AsyncTokenBucket
"""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from hypothesis import given
from hypothesis import strategies as st

from notioncache.notion_api.rate_limit import AsyncTokenBucket
from notioncache.notion_api.retries import compute_backoff, parse_retry_after, should_retry


def make_response(headers: dict | None = None) -> httpx.Response:
    return httpx.Response(429, headers=headers or {})


# ---------------------------------------------------------------------------
# parse_retry_after
# ---------------------------------------------------------------------------

class TestParseRetryAfter:
    def test_numeric_string_returns_float(self):
        assert parse_retry_after(make_response({"retry-after": "5"})) == 5.0

    def test_float_string_returns_float(self):
        assert parse_retry_after(make_response({"retry-after": "2.5"})) == 2.5

    def test_missing_header_returns_none(self):
        assert parse_retry_after(make_response()) is None

    def test_invalid_string_returns_none(self):
        assert parse_retry_after(make_response({"retry-after": "soon"})) is None

    def test_negative_value_returns_none(self):
        assert parse_retry_after(make_response({"retry-after": "-1"})) is None

    def test_rfc_date_string_returns_none(self):
        """HTTP-date values are not supported; returns None gracefully."""
        resp = make_response({"retry-after": "Wed, 21 Oct 2015 07:28:00 GMT"})
        assert parse_retry_after(resp) is None


# ---------------------------------------------------------------------------
# should_retry
# ---------------------------------------------------------------------------

class TestShouldRetry:
    def test_returns_false_on_last_attempt(self):
        assert should_retry(429, None, attempt=2, max_attempts=3) is False

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_retryable_statuses(self, status):
        assert should_retry(status, None, attempt=0, max_attempts=3) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 501])
    def test_final_statuses(self, status):
        assert should_retry(status, None, attempt=0, max_attempts=3) is False

    def test_timeout_exception_is_retryable(self):
        exc = httpx.ReadTimeout("timed out", request=MagicMock())
        assert should_retry(None, exc, attempt=0, max_attempts=3) is True

    def test_connect_error_is_retryable(self):
        assert should_retry(None, httpx.ConnectError("refused"), attempt=0, max_attempts=3) is True

    def test_other_exception_is_not_retryable(self):
        assert should_retry(None, ValueError("bad"), attempt=0, max_attempts=3) is False

    def test_nothing_to_go_on_is_not_retryable(self):
        assert should_retry(None, None, attempt=0, max_attempts=3) is False


# ---------------------------------------------------------------------------
# compute_backoff
# ---------------------------------------------------------------------------

class TestComputeBackoff:
    def test_exponential_without_jitter(self):
        delays = [compute_backoff(a, base=1.0, maximum=60.0, jitter=False) for a in range(4)]
        assert delays == [1.0, 2.0, 4.0, 8.0]

    def test_capped_at_maximum(self):
        assert compute_backoff(10, base=1.0, maximum=5.0, jitter=False) == 5.0

    def test_retry_after_is_a_floor(self):
        assert compute_backoff(0, base=1.0, maximum=60.0, jitter=False, retry_after=7.0) == 7.0

    def test_exponential_wins_over_short_retry_after(self):
        assert compute_backoff(3, base=1.0, maximum=60.0, jitter=False, retry_after=0.5) == 8.0

    @given(
        attempt=st.integers(min_value=0, max_value=20),
        base=st.floats(min_value=0.0, max_value=10.0),
        maximum=st.floats(min_value=0.0, max_value=120.0),
    )
    def test_jitter_stays_within_half_to_full(self, attempt, base, maximum):
        ceiling = min(base * (2 ** attempt), maximum)
        delay = compute_backoff(attempt, base=base, maximum=maximum, jitter=True)
        assert ceiling * 0.5 <= delay <= ceiling

    @given(
        attempt=st.integers(min_value=0, max_value=20),
        retry_after=st.floats(min_value=0.0, max_value=3600.0),
    )
    def test_never_undercuts_retry_after(self, attempt, retry_after):
        delay = compute_backoff(attempt, base=1.0, maximum=60.0, jitter=True, retry_after=retry_after)
        assert delay >= retry_after


# ---------------------------------------------------------------------------
# AsyncTokenBucket
# ---------------------------------------------------------------------------

class TestAsyncTokenBucket:
    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValueError):
            AsyncTokenBucket(rate_rps=0)

    def test_rejects_empty_burst(self):
        with pytest.raises(ValueError):
            AsyncTokenBucket(rate_rps=1.0, burst=0)

    async def test_burst_available_immediately(self):
        bucket = AsyncTokenBucket(rate_rps=1.0, burst=3)
        waits = [await bucket.acquire() for _ in range(3)]
        assert waits == [0.0, 0.0, 0.0]

    async def test_empty_bucket_waits_for_refill(self):
        bucket = AsyncTokenBucket(rate_rps=0.001, burst=1)
        assert await bucket.acquire() == 0.0
        with patch("notioncache.notion_api.rate_limit.asyncio.sleep", new_callable=AsyncMock) as sleep:
            wait = await bucket.acquire()
        # One token at 0.001 per second takes about 1000 seconds to accrue.
        assert 900 < wait <= 1000
        sleep.assert_awaited_once_with(wait)

    async def test_waiting_callers_queue_behind_each_other(self):
        bucket = AsyncTokenBucket(rate_rps=0.001, burst=1)
        await bucket.acquire()
        with patch("notioncache.notion_api.rate_limit.asyncio.sleep", new_callable=AsyncMock):
            first = await bucket.acquire()
            second = await bucket.acquire()
        # The second caller waits for the first reservation plus its own token.
        assert 1900 < second <= 2000
        assert second > first
