"""Per-key debouncing on the running asyncio loop.

``Debouncer`` keeps at most one pending timer per key. Scheduling under
a key that already has a timer cancels it first, so a burst of calls
fires once, with the action from the last call::

    debouncer = Debouncer()
    for text in ("h", "he", "hel"):
        debouncer.schedule("username", 300, lambda text=text: check(text))
    # ~300ms later: check("hel") runs, once

Actions may be plain callables or return an awaitable. Awaitables are
wrapped in tasks that the debouncer tracks until they finish; ``drain()``
waits for them.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger("wren.scheduling")

type Action = Callable[[], Awaitable[Any] | None]


class Debouncer:
    """Coalesce repeated triggers per key into one delayed call.

    Not thread-safe: call it from the event loop that will run the
    actions.
    """

    __slots__ = ("_tasks", "_timers")

    def __init__(self) -> None:
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    def schedule(self, key: str, delay_ms: float, action: Action) -> None:
        """Run *action* after *delay_ms* unless rescheduled or cancelled first."""
        if delay_ms < 0:
            msg = f"delay_ms must be >= 0, got {delay_ms}"
            raise ValueError(msg)
        self.cancel(key)
        loop = asyncio.get_running_loop()
        self._timers[key] = loop.call_later(delay_ms / 1000, self._fire, key, action)

    def cancel(self, key: str) -> bool:
        """Cancel the pending timer for *key*. Returns True if one existed."""
        handle = self._timers.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> int:
        """Cancel every pending timer. Returns how many were cancelled."""
        handles = list(self._timers.values())
        self._timers.clear()
        for handle in handles:
            handle.cancel()
        return len(handles)

    def is_pending(self, key: str) -> bool:
        return key in self._timers

    def __len__(self) -> int:
        return len(self._timers)

    def has_running(self) -> bool:
        """True while a task started by a fired action is still running."""
        return bool(self._tasks)

    async def drain(self) -> None:
        """Wait for every task started by an already-fired action."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # -- internals --

    def _fire(self, key: str, action: Action) -> None:
        self._timers.pop(key, None)
        try:
            result = action()
        except Exception:
            logger.exception("Debounced action for %r failed", key)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Debounced action failed", exc_info=exc)
