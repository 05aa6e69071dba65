"""Error taxonomy for the bridge.

Nothing in here is allowed to take the process down. Resolution and listing
failures are recovered by the scheduler and the registry; invocation failures
are turned into error results by the dispatcher.
"""

from __future__ import annotations

from typing import Optional


class BridgeError(Exception):
    """Base class for all bridge errors."""


class ConfigError(BridgeError):
    """Raised when the configuration cannot be interpreted."""


class EndpointUnreachable(BridgeError):
    """Raised when no candidate endpoint answered its liveness probe."""


class ToolFetchFailure(BridgeError):
    """Raised when the remote tool listing could not be fetched or decoded."""


class InvocationError(BridgeError):
    """Base class for errors raised while forwarding a tool call."""


class NoEndpoint(InvocationError):
    """Raised when a call arrives while no endpoint is current."""

    def __init__(self, message: str = "No working IDE endpoint available.") -> None:
        super().__init__(message)


class TransportFailure(InvocationError):
    """Raised when the backend answered with a non-success status or not at all."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)

    @classmethod
    def from_status(cls, status: int) -> "TransportFailure":
        return cls(f"Response failed: {status}", status=status)


class ProtocolViolation(InvocationError):
    """Raised when the backend's response envelope has an unexpected shape."""


__all__ = [
    "BridgeError",
    "ConfigError",
    "EndpointUnreachable",
    "ToolFetchFailure",
    "InvocationError",
    "NoEndpoint",
    "TransportFailure",
    "ProtocolViolation",
]
