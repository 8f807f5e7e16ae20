"""Bounded exponential backoff for rate-limited text generation calls."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from stepchat.core.errors import RateLimitedError

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

TOO_MANY_REQUESTS = 429


def is_rate_limited(exc: BaseException) -> bool:
    if isinstance(exc, RateLimitedError):
        return True
    return getattr(exc, "status_code", None) == TOO_MANY_REQUESTS


def backoff_schedule(max_retries: int, initial_delay_ms: int) -> list[int]:
    """Delays in milliseconds before each retry, doubling from `initial_delay_ms`."""
    return [initial_delay_ms * 2**retry for retry in range(max(max_retries, 0))]


async def with_retry(
    call: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay_ms: int = 1000,
    *,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Await `call()`, retrying only rate-limit failures.

    At most `max_retries + 1` attempts are made. Any other failure, or a
    rate-limit failure once the budget is spent, is re-raised unchanged.
    """
    delays = backoff_schedule(max_retries, initial_delay_ms)
    attempt = 0
    while True:
        try:
            return await call()
        except Exception as exc:
            if not is_rate_limited(exc) or attempt >= len(delays):
                raise
            delay_ms = delays[attempt]
            attempt += 1
            logging.warning(f"Rate limited, retrying in {delay_ms}ms (attempt {attempt + 1}/{len(delays) + 1})")
            await sleep(delay_ms / 1000)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_ms: int = 1000
    sleep: Sleep = asyncio.sleep

    async def run(self, call: Callable[[], Awaitable[T]]) -> T:
        return await with_retry(
            call,
            max_retries=self.max_retries,
            initial_delay_ms=self.initial_delay_ms,
            sleep=self.sleep,
        )
