"""
Polling helpers for the contract client.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)


async def with_exponential_backoff(
    fn: Callable[[Optional[Any]], Awaitable[Any]],
    keep_waiting_if: Callable[[Any], bool],
    timeout_in_seconds: float,
    exponential_factor: float = 1.5,
    initial_wait: float = 1.0,
) -> List[Any]:
    """
    Call ``fn`` until ``keep_waiting_if`` is false or the timeout elapses.

    The first call happens immediately. Later calls wait ``initial_wait``
    seconds, growing by ``exponential_factor`` each time and clipped so no
    wait ends past the deadline.

    Args:
        fn: Coroutine function receiving the previous attempt's result
            (``None`` on the first call)
        keep_waiting_if: Predicate on the latest result
        timeout_in_seconds: Overall deadline, measured from the first result
        exponential_factor: Growth of the wait between attempts
        initial_wait: First wait in seconds

    Returns:
        Every attempt's result, oldest first
    """
    attempts = [await fn(None)]
    if not keep_waiting_if(attempts[-1]):
        return attempts

    wait_until = time.monotonic() + timeout_in_seconds
    wait_time = initial_wait
    total_wait_time = wait_time

    while time.monotonic() < wait_until and keep_waiting_if(attempts[-1]):
        logger.debug(
            f"Waiting {wait_time:.2f}s before trying again "
            f"({total_wait_time:.2f}s so far, of {timeout_in_seconds}s)"
        )
        await asyncio.sleep(wait_time)

        wait_time *= exponential_factor
        remaining = wait_until - time.monotonic()
        if wait_time > remaining:
            wait_time = max(remaining, 0.0)
        total_wait_time += wait_time

        attempts.append(await fn(attempts[-1]))

    return attempts


__all__ = ["with_exponential_backoff"]
