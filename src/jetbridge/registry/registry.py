"""Tool registry blending the default catalog with tools announced by the IDE."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Sequence,
)

import httpx

from ..discovery.prober import LIST_TOOLS_PATH
from ..discovery.types import Endpoint
from ..errors import ToolFetchFailure
from ..models.tools import ToolDescriptor, ToolRegistrySnapshot
from ..state import BridgeState
from .catalog import DEFAULT_TOOLS

if TYPE_CHECKING:
    from ..config import RegistryConfig

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


def decode_tool_listing(payload: Any) -> List[ToolDescriptor]:
    """Normalize the IDE's tool listing into descriptors.

    The IDE answers either with a bare array of tools or with an object
    wrapping the array under ``tools``. Entries without a usable name are
    skipped.

    Raises:
        ToolFetchFailure: If the payload is neither of the two shapes
    """
    if isinstance(payload, list):
        raw_tools = payload
    elif isinstance(payload, dict) and isinstance(payload.get("tools"), list):
        raw_tools = payload["tools"]
    else:
        raise ToolFetchFailure(
            f"Unexpected tool listing shape: {type(payload).__name__}"
        )

    tools: List[ToolDescriptor] = []
    for entry in raw_tools:
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object tool entry: %r", entry)
            continue
        try:
            tools.append(ToolDescriptor.from_dict(entry))
        except ValueError as e:
            logger.warning("Skipping tool entry: %s", e)
    return tools


def merge_tools(
    static_tools: Iterable[ToolDescriptor],
    remote_tools: Iterable[ToolDescriptor],
) -> List[ToolDescriptor]:
    """Overlay remote tools on the static set by name.

    Every static tool survives. A remote tool replaces a static one of the same
    name only when their content differs; remote-only tools are appended in
    the order the IDE listed them.
    """
    merged: Dict[str, ToolDescriptor] = {tool.name: tool for tool in static_tools}
    for tool in remote_tools:
        if merged.get(tool.name) != tool:
            merged[tool.name] = tool
    return list(merged.values())


class ToolRegistry:
    """Serves the tool list, caching the IDE's listing for a limited time.

    Listing never fails: when the IDE can't be reached the registry falls
    back to the most recent snapshot, even an expired one, and finally to
    the static catalog alone.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        state: BridgeState,
        config: RegistryConfig,
        static_tools: Sequence[ToolDescriptor] = DEFAULT_TOOLS,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.client = client
        self.state = state
        self.config = config
        self.static_tools = tuple(static_tools)
        self._clock = clock
        self._sleep = sleep

    def invalidate(self) -> None:
        """Drop the cached snapshot so the next listing refetches."""
        if self.state.snapshot is not None:
            logger.debug("Invalidating IDE tools cache")
        self.state.publish_snapshot(None)

    async def list_tools(self) -> List[ToolDescriptor]:
        endpoint = self.state.endpoint
        if endpoint is None:
            logger.debug("No endpoint available, using default tools only")
            return list(self.static_tools)

        snapshot = self.state.snapshot
        if snapshot is not None and snapshot.is_valid(self._clock(), self.config.ttl_seconds):
            logger.debug("Using cached IDE tools")
            return self._merge(snapshot)

        logger.debug("Cache invalid or missing, fetching fresh IDE tools")
        try:
            remote_tools = await self.fetch_remote_tools(endpoint)
        except ToolFetchFailure as e:
            # Re-read: a concurrent refresh may have replaced the snapshot
            stale = self.state.snapshot
            if stale is not None:
                logger.warning(
                    "Error fetching IDE tools, serving cached tools %.1fs old: %s",
                    stale.age(self._clock()),
                    e,
                )
                return self._merge(stale)
            logger.warning("Error fetching IDE tools, using default tools only: %s", e)
            return list(self.static_tools)

        snapshot = ToolRegistrySnapshot(
            entries={tool.name: tool for tool in remote_tools},
            fetched_at=self._clock(),
        )
        if self.state.endpoint == endpoint:
            self.state.publish_snapshot(snapshot)
        else:
            logger.debug("Endpoint changed during fetch, not caching tools from %s", endpoint)
        return self._merge(snapshot)

    async def fetch_remote_tools(self, endpoint: Endpoint) -> List[ToolDescriptor]:
        """Fetch the IDE's tool listing with exponential backoff.

        Attempt ``k`` that fails waits ``2**k`` backoff units before the next
        one; the last failure is raised.

        Raises:
            ToolFetchFailure: When every attempt failed
        """
        attempts = self.config.fetch_attempts
        for attempt in range(1, attempts + 1):
            try:
                return await self._fetch_once(endpoint)
            except ToolFetchFailure as e:
                logger.debug("Attempt %s failed: %s", attempt, e)
                if attempt == attempts:
                    raise
                await self._sleep((2**attempt) * self.config.backoff_unit_seconds)
        raise ToolFetchFailure("No fetch attempts configured")

    async def _fetch_once(self, endpoint: Endpoint) -> List[ToolDescriptor]:
        url = endpoint.url_for(LIST_TOOLS_PATH)
        try:
            response = await self.client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ToolFetchFailure(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            raise ToolFetchFailure(f"HTTP error! status: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ToolFetchFailure(f"Tool listing is not valid JSON: {e}") from e
        return decode_tool_listing(payload)

    def _merge(self, snapshot: ToolRegistrySnapshot) -> List[ToolDescriptor]:
        remote = list(snapshot.entries.values())
        tools = merge_tools(self.static_tools, remote)
        logger.debug(
            "Returning %s tools (%s default + %s IDE)",
            len(tools),
            len(self.static_tools),
            len(tools) - len(self.static_tools),
        )
        return tools
