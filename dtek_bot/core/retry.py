from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from dtek_bot.observability.metrics import Metrics

T = TypeVar("T")

BASE_DELAY_SECONDS = 0.1
MAX_DELAY_SECONDS = 1.6

_logger = logging.getLogger("dtek_bot.retry")


def backoff_delay(attempt: int) -> float:
    """Delay in seconds to wait after the given (1-based) failed attempt."""
    return min(BASE_DELAY_SECONDS * 2 ** (attempt - 1), MAX_DELAY_SECONDS)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int,
    label: str,
    *,
    metrics: Metrics | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        _logger.info("[%s] Attempt #%d of %d", label, attempt, max_attempts)
        try:
            result = await operation()
        except Exception as exc:
            _logger.warning("[%s] Error on attempt %d: %s", label, attempt, exc)
            if metrics is not None:
                metrics.mark_upstream_attempt(label, "error")
            if attempt == max_attempts:
                raise
            await sleep(backoff_delay(attempt))
            continue

        if metrics is not None:
            metrics.mark_upstream_attempt(label, "success")
        return result

    raise AssertionError("unreachable")
