"""Editing session for the cabinet layout.

:class:`LayoutSession` owns the in-memory layout.  It is authoritative for
the lifetime of the process: reads are served from memory, every accepted
edit swaps in a new :class:`~cabinet.layout.CabinetLayout` and a debounced
replace-all write follows.  When a write fails the in-memory layout is kept
and the error is recorded so callers can report it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from fastapi import Request

from cabinet.coordinates import DrawerSize
from cabinet.drawer import Drawer
from cabinet.layout import CabinetLayout, ResizeResult
from cabinet.scheduling import DebouncedAction
from cabinet.search import visibility

from .gateway import DrawerGateway, PersistenceError

logger = logging.getLogger(__name__)


class LayoutSession:
    def __init__(self, gateway: DrawerGateway, save_delay: float = 1.0) -> None:
        self.gateway = gateway
        self.layout = CabinetLayout.default()
        self._lock = asyncio.Lock()
        self._saver = DebouncedAction(self._write, save_delay, name="drawer layout save")

    @property
    def save_pending(self) -> bool:
        return self._saver.pending

    @property
    def last_save_error(self) -> Optional[BaseException]:
        return self._saver.last_error

    async def load(self) -> CabinetLayout:
        """Load the stored layout, creating the default one for an empty store."""

        async with self._lock:
            records = await asyncio.to_thread(self.gateway.load_all)
            if not records:
                logger.info("No stored drawers, initialising default layout")
                self.layout = CabinetLayout.default()
                self._saver.schedule(self.layout.records())
                try:
                    await self._saver.flush()
                except PersistenceError:
                    logger.error("Default drawer layout could not be stored; it stays pending")
                return self.layout
            layout = CabinetLayout.from_records(records)
            if [r.id for r in layout] != [r.id for r in sorted(records)]:
                logger.warning("Stored layout was incomplete and has been repaired")
                self.layout = layout
                self._saver.schedule(layout.records())
            else:
                self.layout = layout
            logger.info("Loaded %s drawers", len(self.layout))
            return self.layout

    async def resize(self, drawer_id: str, new_size: DrawerSize | str) -> ResizeResult:
        """Resize ``drawer_id`` and schedule a save when the layout changed."""

        async with self._lock:
            layout, result = self.layout.resize(drawer_id, new_size)
            if result.applied:
                self.layout = layout
                self._saver.schedule(layout.records())
                logger.info("Resized %s to %s", drawer_id, layout.get(drawer_id).size.value)
            return result

    async def update_details(
        self,
        drawer_id: str,
        name: Optional[str] = None,
        keywords: Iterable[str] | str | None = None,
    ) -> Drawer:
        """Rename/re-tag ``drawer_id``; raises ``KeyError`` for unknown ids."""

        async with self._lock:
            self.layout = self.layout.update_details(drawer_id, name, keywords)
            self._saver.schedule(self.layout.records())
            return self.layout.get(drawer_id)

    async def replace(self, records: Iterable[Drawer]) -> int:
        """Replace the whole layout and store it immediately.

        Raises :class:`~cabinet.layout.LayoutInvariantError` when ``records``
        do not cover the cabinet exactly.
        """

        layout = CabinetLayout.from_records(list(records), repair=False)
        async with self._lock:
            self.layout = layout
            self._saver.schedule(layout.records())
            await self._saver.flush()
            return len(layout)

    def search(self, query: str | None) -> dict[str, bool]:
        return visibility(self.layout, query)

    async def flush(self) -> None:
        """Write any pending change now; persistence errors propagate."""

        await self._saver.flush()

    async def close(self) -> None:
        try:
            await self.flush()
        except PersistenceError:
            logger.error("Unsaved drawer changes were lost on shutdown")

    async def _write(self, records: list[Drawer]) -> int:
        return await asyncio.to_thread(self.gateway.replace_all, records)


def get_layout_session(request: Request) -> LayoutSession:
    """FastAPI dependency returning the application's layout session."""

    return request.app.state.layout_session


def get_gateway(request: Request) -> DrawerGateway:
    """FastAPI dependency returning the application's persistence gateway."""

    return request.app.state.gateway
