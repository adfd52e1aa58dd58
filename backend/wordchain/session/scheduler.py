"""
Delayed lifecycle transitions run as asyncio tasks.

Each transition is tagged with the session epoch it was scheduled under. The
scheduler only tracks the tasks and reports failures; the epoch comparison
happens in the callback under the coordinator lock so it cannot race with a
handler that advances the epoch.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

# Callback type: (epoch) -> Awaitable[None]
TransitionCallback = Callable[[int], Awaitable[None]]


class TransitionScheduler:
    """Run fire-and-forget delayed transitions and keep them cancellable on shutdown."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def schedule(self, delay_ms: int, epoch: int, callback: TransitionCallback, name: str) -> asyncio.Task[None]:
        """Invoke ``callback(epoch)`` after ``delay_ms`` milliseconds."""
        task = asyncio.create_task(self._run(delay_ms / 1000, epoch, callback, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("transition scheduled", transition=name, epoch=epoch, delay_ms=delay_ms)
        return task

    def cancel_all(self) -> None:
        """Cancel every pending transition (used on server shutdown)."""
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
        self._tasks.clear()

    async def _run(self, seconds: float, epoch: int, callback: TransitionCallback, name: str) -> None:
        try:
            await asyncio.sleep(seconds)
            await callback(epoch)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("transition callback failed", transition=name, epoch=epoch)
