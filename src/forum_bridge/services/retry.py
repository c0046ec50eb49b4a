from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Awaitable, Callable

import httpx

# Discourse answers 429 under its per-IP rate limits and 502/503 while rebuilding.
TRANSIENT_HTTP_STATUS = {408, 409, 425, 429, 500, 502, 503, 504}

_TRANSPORT_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 8.0

    @classmethod
    def bounded(cls, max_attempts: int, base_delay_seconds: float, max_delay_seconds: float) -> "RetryPolicy":
        base = max(0.0, float(base_delay_seconds))
        return cls(
            max_attempts=max(1, int(max_attempts)),
            base_delay_seconds=base,
            max_delay_seconds=max(base, float(max_delay_seconds)),
        )

    def backoff(self, attempt: int) -> float:
        return min(self.max_delay_seconds, self.base_delay_seconds * (2 ** (attempt - 1)))


@dataclass
class RetryableHttpError(Exception):
    status_code: int
    message: str
    retry_after_seconds: float | None = None


def parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    if value.isdigit():
        return max(0.0, float(value))
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max(0.0, (retry_at - datetime.now(timezone.utc)).total_seconds())


def should_retry_http_status(status_code: int) -> bool:
    return int(status_code) in TRANSIENT_HTTP_STATUS


def should_retry_exception(exc: Exception) -> tuple[bool, float | None]:
    if isinstance(exc, RetryableHttpError):
        return True, exc.retry_after_seconds
    if isinstance(exc, _TRANSPORT_ERRORS):
        return True, None
    return False, None


async def with_retry(
    *,
    operation: str,
    call: Callable[[], Awaitable[httpx.Response]],
    policy: RetryPolicy,
    logger: logging.Logger,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> httpx.Response:
    """
    Run ``call`` until it returns a non-transient response.

    Transient statuses are retried with exponential backoff (or the server's
    ``Retry-After``). The last transient response is returned as-is once the
    attempts run out so callers can inspect or raise on it.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            response = await call()
            if should_retry_http_status(response.status_code):
                if attempt >= policy.max_attempts:
                    return response
                raise RetryableHttpError(
                    status_code=int(response.status_code),
                    message=f"retryable HTTP status {response.status_code}",
                    retry_after_seconds=parse_retry_after(response.headers.get("Retry-After")),
                )
            return response
        except Exception as exc:
            retryable, retry_after = should_retry_exception(exc)
            if not retryable or attempt >= policy.max_attempts:
                raise
            delay = retry_after if retry_after is not None else policy.backoff(attempt)
            delay = min(delay, policy.max_delay_seconds)
            logger.warning(
                "Retrying Discourse request after transient failure",
                extra={
                    "event": "discourse_retry_scheduled",
                    "operation": operation,
                    "attempt": attempt,
                    "max_attempts": policy.max_attempts,
                    "delay_seconds": delay,
                    "error": repr(exc),
                },
            )
            await sleep(delay)

    raise RuntimeError(f"Retry loop exhausted unexpectedly for operation '{operation}'")
