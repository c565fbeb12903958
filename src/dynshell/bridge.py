"""Blocking bridge between the turn-based shell and the async AWS clients."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BlockingBridge:
    """
    Runs awaitables to completion on a private event loop.

    Every call blocks until the awaitable settles and returns its value, or
    re-raises the awaitable's exception unchanged. There is no timeout.

    The loop is created lazily and reused so that clients opened inside it
    (aioboto3 sessions) stay bound to the same loop for the process lifetime.
    """

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        """Get or create the event loop."""
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
            logger.debug("Created event loop %r", self._loop)
        return self._loop

    def run(self, awaitable: Awaitable[T]) -> T:
        """Block until ``awaitable`` settles and return its result."""
        loop = self._get_loop()
        if loop.is_running():
            raise RuntimeError("BlockingBridge.run() cannot be nested inside its own loop")
        return loop.run_until_complete(awaitable)

    def close(self) -> None:
        """Close the event loop."""
        if self._loop is not None and not self._loop.is_closed():
            self._loop.close()
        self._loop = None

    def __enter__(self) -> "BlockingBridge":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


_default_bridge: BlockingBridge | None = None


def get_bridge() -> BlockingBridge:
    """Return the process-wide bridge shared by all table handles."""
    global _default_bridge
    if _default_bridge is None:
        _default_bridge = BlockingBridge()
    return _default_bridge
