"""Periodic endpoint refresh."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..discovery.resolver import EndpointResolver
from ..errors import EndpointUnreachable
from ..registry.registry import ToolRegistry
from ..state import BridgeState

logger = logging.getLogger(__name__)

ChangeNotifier = Callable[[], Awaitable[None]]


class RefreshScheduler:
    """Re-resolves the IDE endpoint on a fixed interval.

    ``start()`` runs the first tick inline so callers only proceed once an
    initial resolution attempt has finished. Later ticks run in a background
    task until ``stop()``.
    """

    def __init__(
        self,
        resolver: EndpointResolver,
        registry: ToolRegistry,
        state: BridgeState,
        interval: float = 10.0,
        notify: Optional[ChangeNotifier] = None,
    ) -> None:
        self.resolver = resolver
        self.registry = registry
        self.state = state
        self.interval = interval
        self.notify = notify
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        await self.tick()
        self._task = asyncio.create_task(self._run(), name="jetbridge-refresh")
        logger.debug("Scheduled endpoint check every %s seconds", self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def tick(self) -> bool:
        """Run one resolution and react to an endpoint change.

        Returns:
            True if the current endpoint changed
        """
        previous = self.state.endpoint
        try:
            endpoint = await self.resolver.resolve()
        except EndpointUnreachable as e:
            logger.warning("Failed to update IDE endpoint: %s", e)
        else:
            self.state.publish_endpoint(endpoint)
            logger.debug("Updated cached endpoint to: %s", endpoint)

        current = self.state.endpoint
        if current == previous:
            return False

        logger.info("IDE endpoint changed from %s to %s", previous, current)
        self.registry.invalidate()
        if self.notify is not None:
            await self.notify()
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.tick()
            except Exception:
                logger.exception("Error during endpoint check")
