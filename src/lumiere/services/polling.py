"""Fixed-interval polling for long-running operations."""

import asyncio
import time
from typing import Awaitable, Callable, TypeVar

import structlog

from lumiere.services.exceptions import PollTimeoutError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def poll_until_done(
    handle: T,
    refresh: Callable[[T], Awaitable[T]],
    is_done: Callable[[T], bool],
    interval_seconds: float,
    timeout_seconds: float | None = None,
) -> T:
    """Refresh an operation handle until it reports completion.

    Sleeps ``interval_seconds`` before every refresh and replaces the handle with
    the refreshed one. There is no iteration cap. Errors raised by ``refresh``
    propagate unchanged.

    Args:
        handle: Handle returned by the start call
        refresh: Coroutine function returning the refreshed handle
        is_done: Predicate reporting completion
        interval_seconds: Delay before each refresh
        timeout_seconds: Optional upper bound on total wait (None = wait forever)

    Returns:
        The first handle for which ``is_done`` is true

    Raises:
        PollTimeoutError: If a timeout is set and elapses before completion
    """
    started = time.monotonic()
    polls = 0

    while not is_done(handle):
        if timeout_seconds is not None and time.monotonic() - started >= timeout_seconds:
            raise PollTimeoutError(
                f"Operation did not complete within {timeout_seconds}s ({polls} polls)"
            )

        await asyncio.sleep(interval_seconds)
        handle = await refresh(handle)
        polls += 1
        logger.debug("operation.polled", polls=polls, done=is_done(handle))

    return handle
