"""HTTP client for the Supabase PostgREST API.

Usage example:
    from hydrater.infrastructure.io.http import build_supabase_client

    client = build_supabase_client(
        api_key="service-or-anon-key",
        max_rpm=600,
        min_delay_seconds=0.0,
        circuit_breaker_threshold=5,
        circuit_breaker_timeout_seconds=60.0,
        max_retries=3,
        backoff_factor=0.5,
        max_backoff_seconds=60.0,
        jitter_seconds=0.1,
        timeout_seconds=30.0,
    )
    rows = client.get_rows(
        "https://project.supabase.co/rest/v1/ratings",
        {"select": "fountain_id,coldness", "user_id": "eq.u-1"},
    )
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import override

import requests

from ...exceptions import AuthenticationError, JsonArrayExpectedError, RateLimitError
from ...observability import get_logger
from ...protocols import CircuitBreaker, JsonApiClient, RateLimiter, RetryPolicy
from ..resilience import CircuitBreaker as CircuitBreakerImpl
from ..resilience import RateLimiter as RateLimiterImpl
from ..resilience import RetryPolicy as RetryPolicyImpl
from .validation import IncomingDataError, validate_json_as

logger = get_logger("hydrater.infrastructure.http")


def build_supabase_client(
    *,
    api_key: str,
    max_rpm: int,
    min_delay_seconds: float,
    circuit_breaker_threshold: int,
    circuit_breaker_timeout_seconds: float,
    max_retries: int,
    backoff_factor: float,
    max_backoff_seconds: float,
    jitter_seconds: float,
    timeout_seconds: float,
) -> ResilientHttpClient:
    session = requests.Session()
    session.headers.update(
        {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
    )
    rate_limiter = RateLimiterImpl(max_rpm=max_rpm, min_delay_seconds=min_delay_seconds)
    circuit_breaker = CircuitBreakerImpl(
        threshold=circuit_breaker_threshold,
        recovery_timeout_seconds=circuit_breaker_timeout_seconds,
    )
    retry_policy = RetryPolicyImpl(
        max_retries=max_retries,
        backoff_factor=backoff_factor,
        max_backoff_seconds=max_backoff_seconds,
        jitter_seconds=jitter_seconds,
    )
    return ResilientHttpClient(
        session=session,
        rate_limiter=rate_limiter,
        circuit_breaker=circuit_breaker,
        retry_policy=retry_policy,
        timeout_seconds=timeout_seconds,
    )


def parse_retry_after(headers: Mapping[str, str] | None) -> int | None:
    """Parse Retry-After header into seconds, if available."""
    if not headers:
        return None
    value = headers.get("Retry-After")
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return int(value)
    try:
        dt = parsedate_to_datetime(value)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        delta = (dt - datetime.now(UTC)).total_seconds()
        return max(0, int(delta))
    except (AttributeError, OverflowError, TypeError, ValueError):
        return None


def _response_details(response: requests.Response) -> str:
    """Return a compact status/body summary for error reporting."""
    try:
        body = response.text
    except (UnicodeDecodeError, ValueError, requests.RequestException):
        body = "<unreadable>"
    body = " ".join(str(body).split())
    if len(body) > 300:
        body = body[:300] + "..."
    return f"status={response.status_code}, body={body}"


class ResilientHttpClient(JsonApiClient):
    """HTTP client with rate limiting, retries and a circuit breaker.

    Error handling:
    - 401/403 raise AuthenticationError immediately (fatal)
    - 429 and 5xx retry with exponential backoff, honouring Retry-After
    - Timeouts and connection errors retry with exponential backoff
    - Other request failures are recorded by the circuit breaker and re-raised
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        rate_limiter: RateLimiter | None = None,
        circuit_breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.session = session
        self.rate_limiter = rate_limiter or RateLimiterImpl()
        self.circuit_breaker = circuit_breaker or CircuitBreakerImpl()
        self.retry_policy = retry_policy or RetryPolicyImpl()
        self.timeout_seconds = timeout_seconds

    @override
    def get_rows(self, url: str, params: Mapping[str, str]) -> list[dict[str, object]]:
        """Fetch a JSON array of rows.

        Raises:
            AuthenticationError: If Supabase returns 401 or 403
            CircuitBreakerOpen: If too many consecutive failures
            RateLimitError: If rate limit exceeded and backoff fails
            JsonArrayExpectedError: If the body is not a JSON array of objects
            requests.RequestException: For other HTTP errors
        """
        attempt = 0
        while True:
            self.circuit_breaker.check()
            self.rate_limiter.wait_if_needed()

            try:
                r = self.session.get(url, params=dict(params), timeout=self.timeout_seconds)
            except self.retry_policy.retry_exceptions:
                if attempt < self.retry_policy.max_retries:
                    time.sleep(self.retry_policy.compute_backoff(attempt))
                    attempt += 1
                    continue
                self.circuit_breaker.record_failure()
                raise
            except requests.RequestException:
                self.circuit_breaker.record_failure()
                raise

            if r.status_code in (401, 403):
                self.circuit_breaker.record_failure()
                raise AuthenticationError.for_status(r.status_code, _response_details(r))

            if r.status_code in self.retry_policy.retry_statuses:
                retry_after = parse_retry_after(getattr(r, "headers", None))
                if attempt < self.retry_policy.max_retries:
                    time.sleep(self.retry_policy.compute_backoff(attempt, retry_after))
                    attempt += 1
                    continue
                self.circuit_breaker.record_failure()
                if r.status_code == 429:
                    logger.warning("Rate limit response: %s", _response_details(r))
                    raise RateLimitError(retry_after or 60)
                r.raise_for_status()

            try:
                r.raise_for_status()
            except requests.HTTPError:
                self.circuit_breaker.record_failure()
                raise

            try:
                rows = validate_json_as(list[dict[str, object]], r.text)
            except IncomingDataError as exc:
                self.circuit_breaker.record_failure()
                raise JsonArrayExpectedError(url) from exc

            self.circuit_breaker.record_success()
            return rows
