"""
Deferred work for UI-facing commands.

A few commands (``blur``) act on the next frame instead of immediately.
They do so through a scheduler owned by the editor. Every scheduled
task carries a ``CancellationToken``; ``Editor.destroy()`` cancels the
token, so tasks scheduled against a destroyed editor never run.

Two schedulers ship with the package:

- ``FrameScheduler``: queues tasks until ``flush()`` is called. Used
  when the host drives its own frame loop, and in tests.
- ``AsyncioFrameScheduler``: hands tasks to ``loop.call_soon``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class CancellationToken:
    """One-way flag shared by the tasks of one owner."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        return f"<CancellationToken cancelled={self._cancelled}>"


@dataclass
class DeferredTask:
    """A callback that runs once unless its token was cancelled first."""

    callback: Callable[[], None]
    token: CancellationToken = field(default_factory=CancellationToken)
    name: str = "task"
    done: bool = False

    def __call__(self) -> None:
        if self.done:
            return
        self.done = True

        if self.token.cancelled:
            logger.debug(f"[scheduler] Skipping cancelled task '{self.name}'")
            return

        self.callback()


class Scheduler(Protocol):
    """Anything that can run a deferred task later."""

    def schedule(self, task: DeferredTask) -> DeferredTask:
        ...


class FrameScheduler:
    """
    Runs scheduled tasks when ``flush()`` is called.

    Tasks scheduled while flushing run on the next flush.
    """

    def __init__(self) -> None:
        self._pending: list[DeferredTask] = []

    def schedule(self, task: DeferredTask) -> DeferredTask:
        self._pending.append(task)
        return task

    def flush(self) -> int:
        """Run pending tasks. Returns how many were taken off the queue."""
        pending, self._pending = self._pending, []
        for task in pending:
            task()
        return len(pending)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def __repr__(self) -> str:
        return f"<FrameScheduler pending={len(self._pending)}>"


class AsyncioFrameScheduler:
    """Runs scheduled tasks on the next iteration of an asyncio loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, task: DeferredTask) -> DeferredTask:
        self.loop.call_soon(task)
        return task
