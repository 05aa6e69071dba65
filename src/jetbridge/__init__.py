"""jetbridge: MCP proxy for the tools of a running JetBrains IDE."""

from .config import BridgeConfig, load_config
from .discovery import Endpoint, EndpointResolver, LivenessProber, ProbeResult
from .errors import (
    BridgeError,
    ConfigError,
    EndpointUnreachable,
    NoEndpoint,
    ProtocolViolation,
    ToolFetchFailure,
    TransportFailure,
)
from .models import InvocationResult, ToolDescriptor, ToolRegistrySnapshot
from .registry import DEFAULT_TOOLS, ToolRegistry
from .server import BridgeServer
from .services import CallDispatcher, RefreshScheduler
from .state import BridgeState

__version__ = "0.1.0"

__all__ = [
    "BridgeServer",
    "BridgeState",
    "BridgeConfig",
    "load_config",
    "Endpoint",
    "ProbeResult",
    "LivenessProber",
    "EndpointResolver",
    "ToolRegistry",
    "DEFAULT_TOOLS",
    "CallDispatcher",
    "RefreshScheduler",
    "ToolDescriptor",
    "ToolRegistrySnapshot",
    "InvocationResult",
    "BridgeError",
    "ConfigError",
    "EndpointUnreachable",
    "ToolFetchFailure",
    "NoEndpoint",
    "TransportFailure",
    "ProtocolViolation",
]
