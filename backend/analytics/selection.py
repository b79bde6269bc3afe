"""
Selection-driven request coordination.

Dashboard selections (season, drivers, statistics, race) change in bursts and
each change triggers a fetch followed by a transform. Only the newest request
may update what the user sees:

- RequestGeneration hands out increasing tokens and tells whether a token is
  still the latest one.
- Debouncer waits for a quiet period before running a request, and drops the
  result of any request that has been superseded in the meantime.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Quiet period before a selection change triggers a fetch (seconds)
DEBOUNCE_DELAY = 0.3


class RequestGeneration:
    """Monotonic request tokens; only the latest token may apply results."""

    def __init__(self):
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        """Issue a new token, superseding all earlier ones."""
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    def apply(self, token: int, fn: Callable[..., Any], *args: Any) -> bool:
        """
        Call ``fn(*args)`` only if ``token`` is still the latest.

        Returns:
            True if ``fn`` was called
        """
        if not self.is_current(token):
            logger.debug(f"Discarding result for stale token {token} (latest {self._latest})")
            return False
        fn(*args)
        return True


class Debouncer:
    """Coalesce rapid triggers and return only the newest request's result."""

    def __init__(
        self,
        delay: float = DEBOUNCE_DELAY,
        generation: RequestGeneration | None = None,
    ):
        self.delay = delay
        self.generation = generation or RequestGeneration()

    async def trigger(self, factory: Callable[[], Awaitable[T]]) -> T | None:
        """
        Run ``factory`` after the quiet period unless a newer trigger arrives.

        Args:
            factory: Zero-argument callable returning the awaitable to run

        Returns:
            The factory's result, or None when superseded before or while
            running
        """
        token = self.generation.issue()
        await asyncio.sleep(self.delay)

        if not self.generation.is_current(token):
            logger.debug(f"Request {token} superseded before it started")
            return None

        result = await factory()

        if not self.generation.is_current(token):
            logger.debug(f"Discarding stale result for request {token}")
            return None
        return result
