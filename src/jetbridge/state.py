"""Shared mutable state of a running bridge.

A single ``BridgeState`` is created by the server facade and handed to every
component. All fields are replaced by plain reference assignment of fully
constructed immutable values, so an interleaved reader on the event loop
never observes a half-written endpoint or snapshot.
"""

from __future__ import annotations

from typing import Optional

from .discovery.types import Endpoint
from .models.tools import ToolRegistrySnapshot


class BridgeState:
    """Current endpoint, last probe fingerprint and tool registry snapshot."""

    def __init__(self) -> None:
        self._endpoint: Optional[Endpoint] = None
        self._fingerprint: Optional[str] = None
        self._snapshot: Optional[ToolRegistrySnapshot] = None

    # Endpoint
    @property
    def endpoint(self) -> Optional[Endpoint]:
        return self._endpoint

    def publish_endpoint(self, endpoint: Optional[Endpoint]) -> None:
        self._endpoint = endpoint

    def clear_endpoint(self) -> None:
        self._endpoint = None

    # Fingerprint
    @property
    def fingerprint(self) -> Optional[str]:
        return self._fingerprint

    def record_fingerprint(self, fingerprint: Optional[str]) -> bool:
        """Store a new fingerprint.

        Returns:
            True if a previous fingerprint existed and differs from the new one
        """
        previous = self._fingerprint
        self._fingerprint = fingerprint
        return previous is not None and previous != fingerprint

    # Registry snapshot
    @property
    def snapshot(self) -> Optional[ToolRegistrySnapshot]:
        return self._snapshot

    def publish_snapshot(self, snapshot: Optional[ToolRegistrySnapshot]) -> None:
        self._snapshot = snapshot

    def __repr__(self) -> str:
        endpoint = str(self._endpoint) if self._endpoint else "none"
        snapshot = (
            f"{len(self._snapshot.entries)} tools" if self._snapshot else "no snapshot"
        )
        return f"<BridgeState endpoint={endpoint} ({snapshot})>"
