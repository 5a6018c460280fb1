"""Trailing-edge debouncing for asyncio code.

Rapid edits to the layout should produce a single write once the user stops
clicking.  :class:`DebouncedAction` keeps only the arguments of the most
recent :meth:`~DebouncedAction.schedule` call and runs the action once the
delay has passed without another call.  Pending work can be flushed
explicitly, which the application does on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class DebouncedAction:
    """Run an async ``action`` after ``delay`` seconds of inactivity."""

    def __init__(
        self,
        action: Callable[..., Awaitable[Any]],
        delay: float = 1.0,
        *,
        name: str = "debounced action",
    ) -> None:
        self._action = action
        self.delay = max(0.0, float(delay))
        self.name = name
        self._args: Optional[tuple[tuple[Any, ...], dict[str, Any]]] = None
        self._sleeper: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self.last_error: Optional[BaseException] = None
        self.runs = 0

    @property
    def pending(self) -> bool:
        """``True`` while a call is waiting to be executed."""

        return self._args is not None

    def schedule(self, *args: Any, **kwargs: Any) -> None:
        """Replace the pending call with ``args`` and restart the timer.

        Must be called from within a running event loop.
        """

        self._args = (args, kwargs)
        self._cancel_sleeper()
        loop = asyncio.get_running_loop()
        self._sleeper = loop.create_task(self._delayed())

    def cancel(self) -> None:
        """Drop the pending call without running it."""

        self._args = None
        self._cancel_sleeper()

    async def flush(self) -> None:
        """Run the pending call now and wait for it.

        Exceptions raised by the action propagate to the caller.
        """

        self._cancel_sleeper()
        await self._run_pending(reraise=True)

    async def wait(self) -> None:
        """Wait until the currently scheduled call (if any) has finished."""

        while self._sleeper is not None:
            await asyncio.wait({self._sleeper})
        async with self._lock:
            pass

    def _cancel_sleeper(self) -> None:
        if self._sleeper is not None and not self._sleeper.done():
            self._sleeper.cancel()
        self._sleeper = None

    async def _delayed(self) -> None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            return
        self._sleeper = None
        await self._run_pending(reraise=False)

    async def _run_pending(self, *, reraise: bool) -> None:
        async with self._lock:
            if self._args is None:
                return
            args, kwargs = self._args
            self._args = None
            try:
                await self._action(*args, **kwargs)
            except Exception as exc:
                self.last_error = exc
                # Keep the failed payload unless a newer call replaced it.
                if self._args is None:
                    self._args = (args, kwargs)
                logger.exception("%s failed", self.name)
                if reraise:
                    raise
                return
            self.runs += 1
            self.last_error = None
