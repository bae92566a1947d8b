"""Bounded in-request polling."""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollCancelled(Exception):
    """The cancellation check reported that the caller has gone away."""


async def poll(
    fetch: Callable[[], Awaitable[T]],
    retry_if: Callable[[T], bool],
    attempts: int = 3,
    delay: float = 2.0,
    backoff: float = 1.0,
    cancelled: Optional[Callable[[], Awaitable[bool]]] = None,
) -> T:
    """Call ``fetch`` until ``retry_if`` is false for its result or attempts run out.

    Returns the last result either way; the caller decides what an exhausted
    result means. Waits ``delay`` seconds between attempts, multiplied by
    ``backoff`` after each wait. Exceptions from ``fetch`` propagate.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")
    wait = delay
    result = await fetch()
    for attempt in range(1, attempts):
        if not retry_if(result):
            return result
        logger.info("Still waiting, retrying... (%s/%s)", attempt, attempts)
        if cancelled is not None and await cancelled():
            raise PollCancelled()
        await asyncio.sleep(wait)
        wait *= backoff
        if cancelled is not None and await cancelled():
            raise PollCancelled()
        result = await fetch()
    return result
