"""Endpoint resolver for the IDE's automation API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from ..errors import EndpointUnreachable
from ..state import BridgeState
from .prober import LivenessProber
from .types import Endpoint, ProbeResult

if TYPE_CHECKING:
    from ..config import BackendConfig

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[], Awaitable[None]]


class EndpointResolver:
    """Picks a working endpoint for the IDE.

    Priority:
    1. Explicit port override (no fallback when it fails)
    2. The current endpoint, if it still answers
    3. Ascending scan of the configured port range, lowest live port wins
    """

    def __init__(
        self,
        config: BackendConfig,
        prober: LivenessProber,
        state: BridgeState,
        on_change: Optional[ChangeCallback] = None,
    ) -> None:
        """Initialize resolver.

        Args:
            config: Backend host, override port and scan range
            prober: Liveness prober used for every candidate
            state: Shared bridge state; holds the current endpoint and fingerprint
            on_change: Awaited when a successful probe of the current endpoint
                returns a different fingerprint than the previous one
        """
        self.config = config
        self.prober = prober
        self.state = state
        self.on_change = on_change

    async def resolve(self) -> Endpoint:
        """Resolve a working endpoint.

        Does not publish the result; the caller owns that decision. A cached
        endpoint that fails its own re-check is cleared from the state before
        scanning.

        Returns:
            The endpoint that answered

        Raises:
            EndpointUnreachable: If no candidate responds
        """
        try:
            return await self._resolve()
        except EndpointUnreachable:
            # Forget the fingerprint so a returning backend counts as a change
            self.state.record_fingerprint("")
            raise

    async def _resolve(self) -> Endpoint:
        # 1. Explicit override is trusted, never scanned around
        if self.config.port is not None:
            candidate = self.config.endpoint_for(self.config.port)
            logger.debug("IDE port override is %s, testing it", self.config.port)
            if await self._check(candidate):
                logger.debug("IDE port %s is working", self.config.port)
                return candidate

            if self.state.endpoint == candidate:
                self.state.clear_endpoint()
            raise EndpointUnreachable(
                f"Specified IDE port {self.config.port} is not responding correctly"
            )

        # 2. Reuse the current endpoint if it still answers
        current = self.state.endpoint
        if current is not None:
            if await self._check(current):
                logger.debug("Using cached endpoint %s, it's still working", current)
                return current
            logger.info("Cached endpoint %s stopped responding", current)
            self.state.clear_endpoint()

        # 3. Scan the port range
        for port in self.config.candidate_ports():
            candidate = self.config.endpoint_for(port)
            logger.debug("Testing port %s...", port)
            if await self._check(candidate):
                logger.info("Found working IDE endpoint at %s", candidate)
                return candidate

        start, end = self.config.port_range_start, self.config.port_range_end
        raise EndpointUnreachable(
            f"No working IDE endpoint found in range {start}-{end}"
        )

    async def _check(self, endpoint: Endpoint) -> bool:
        result = await self.prober.probe(endpoint)
        if result.alive:
            await self._record(result)
        return result.alive

    async def _record(self, result: ProbeResult) -> None:
        if not self.state.record_fingerprint(result.fingerprint):
            return
        # A different endpoint is reported by the caller once it is published
        if result.endpoint != self.state.endpoint:
            logger.debug("Fingerprint changed with the endpoint, not notifying")
            return
        logger.info("IDE tool listing has changed since the last check")
        if self.on_change is not None:
            await self.on_change()
