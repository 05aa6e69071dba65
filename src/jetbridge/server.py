from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from .config import BridgeConfig
from .discovery.prober import LivenessProber
from .discovery.resolver import EndpointResolver
from .discovery.types import Endpoint
from .models.tools import InvocationResult, ToolDescriptor
from .registry.catalog import DEFAULT_TOOLS
from .registry.registry import Clock, Sleep, ToolRegistry
from .services.dispatch import CallDispatcher
from .services.scheduler import RefreshScheduler
from .state import BridgeState

logger = logging.getLogger(__name__)

ToolsChangedCallback = Callable[[], Awaitable[None]]


class BridgeServer:
    """Facade wiring discovery, registry and dispatch around one shared state.

    Owns the HTTP client used to talk to the IDE unless one is injected.
    """

    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        on_tools_changed: Optional[ToolsChangedCallback] = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config or BridgeConfig()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.config.backend.timeout_seconds,
            headers={"Accept": "application/json"},
        )
        self.on_tools_changed = on_tools_changed

        self.state = BridgeState()
        self.prober = LivenessProber(self.client)
        self.registry = ToolRegistry(
            self.client,
            self.state,
            self.config.registry,
            static_tools=DEFAULT_TOOLS,
            clock=clock,
            sleep=sleep,
        )
        self.resolver = EndpointResolver(
            self.config.backend,
            self.prober,
            self.state,
            on_change=self._on_listing_changed,
        )
        self.dispatcher = CallDispatcher(self.client, self.state)
        self.scheduler = RefreshScheduler(
            self.resolver,
            self.registry,
            self.state,
            interval=self.config.scheduler.interval_seconds,
            notify=self._notify_tools_changed,
        )

    @property
    def endpoint(self) -> Optional[Endpoint]:
        return self.state.endpoint

    async def start(self) -> None:
        """Resolve the endpoint once, then keep refreshing in the background."""
        logger.debug("Initializing bridge...")
        await self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()
        if self._owns_client:
            await self.client.aclose()

    async def refresh(self) -> bool:
        """Run one endpoint check outside the regular schedule."""
        return await self.scheduler.tick()

    async def list_tools(self) -> List[ToolDescriptor]:
        return await self.registry.list_tools()

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> InvocationResult:
        return await self.dispatcher.invoke(name, arguments)

    async def _on_listing_changed(self) -> None:
        # The IDE's own listing moved; cached tools are outdated
        self.registry.invalidate()
        await self._notify_tools_changed()

    async def _notify_tools_changed(self) -> None:
        if self.on_tools_changed is None:
            return
        try:
            await self.on_tools_changed()
        except Exception:
            logger.exception("Error sending tools changed notification")
