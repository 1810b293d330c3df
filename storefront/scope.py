"""Cancellable request scope keyed by a generation counter.

Every request issued through a scope remembers the generation it started in.
Resetting the scope (new identifier, screen teardown) bumps the generation and
cancels whatever is still pending, so a late response can never overwrite
state written for a newer generation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationCancelled(Exception):
    """A request was cancelled or superseded before its result could be applied."""

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(f"{kind} {reason}")
        self.kind = kind
        self.reason = reason


class RequestScope:
    """Owns the pending requests of one screen and the generation they belong to."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._generation = 0
        self._pending: dict[str, asyncio.Future] = {}
        self._closed = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_kinds(self) -> list[str]:
        return sorted(self._pending)

    def is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def reset(self, reason: str = "reset") -> int:
        """Start a new generation and cancel everything issued before it."""
        self._generation += 1
        pending = list(self._pending.items())
        self._pending.clear()
        for kind, task in pending:
            task.cancel()
        logger.debug(
            "scope_reset scope=%s generation=%d reason=%s cancelled=%s",
            self.name,
            self._generation,
            reason,
            [kind for kind, _ in pending],
        )
        return self._generation

    def close(self) -> None:
        """Cancel all pending requests and refuse new ones."""
        if self._closed:
            return
        self.reset("teardown")
        self._closed = True

    async def dispatch(self, kind: str, call: Callable[[], T]) -> T:
        """Run a blocking ``call`` off the event loop and return its result if still current.

        Raises ``OperationCancelled`` when the request was cancelled, superseded by
        another request of the same kind, or belongs to an older generation.
        Any other failure raised by ``call`` propagates unchanged.
        """
        if self._closed:
            raise OperationCancelled(kind, "scope_closed")

        generation = self._generation
        previous = self._pending.pop(kind, None)
        if previous is not None:
            previous.cancel()
            logger.debug("request_superseded scope=%s kind=%s", self.name, kind)

        task = asyncio.ensure_future(asyncio.to_thread(call))
        self._pending[kind] = task
        logger.debug("request_issued scope=%s kind=%s generation=%d", self.name, kind, generation)
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._pending.get(kind) is task:
                del self._pending[kind]

        if task.cancelled():
            logger.debug("request_cancelled scope=%s kind=%s generation=%d", self.name, kind, generation)
            raise OperationCancelled(kind, "cancelled")

        if not self.is_current(generation):
            # Mark any failure as retrieved; a stale result is dropped either way.
            task.exception()
            logger.debug(
                "request_stale scope=%s kind=%s generation=%d current=%d",
                self.name,
                kind,
                generation,
                self._generation,
            )
            raise OperationCancelled(kind, "stale")

        return task.result()
