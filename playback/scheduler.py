"""Cancellable autoplay timer

AutoplayTimer owns at most one asyncio task. ``arm()`` always disarms the
previous task before creating a new one, and a tick from a task that is no
longer the armed one is dropped, so a stale timer can never drive the
session.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol


class TimerProtocol(Protocol):
    """Protocol for the scheduled task driving autoplay.

    The session only arms, disarms, and asks whether a timer is armed.
    """

    @property
    def armed(self) -> bool: ...

    def arm(self, interval: float, on_tick: Callable[[], None]) -> None: ...

    def disarm(self) -> None: ...


class AutoplayTimer:
    """Repeating asyncio timer calling ``on_tick`` every ``interval`` seconds.

    Must be armed from inside a running event loop.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task | None = None
        self.interval: float | None = None

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self, interval: float, on_tick: Callable[[], None]) -> None:
        """Replace any armed task with a new one.

        Raises:
            RuntimeError: Outside a running event loop; the previous task is kept
        """
        loop = asyncio.get_running_loop()
        self.disarm()
        self.interval = interval
        self._task = loop.create_task(self._run(interval, on_tick))
        print(f"[TIMER] Armed: interval={interval:.3f}s")

    def disarm(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        self.interval = None
        if not task.done():
            task.cancel()
        print("[TIMER] Disarmed")

    async def _run(self, interval: float, on_tick: Callable[[], None]) -> None:
        while True:
            await asyncio.sleep(interval)
            if self._task is not asyncio.current_task():
                return
            on_tick()
