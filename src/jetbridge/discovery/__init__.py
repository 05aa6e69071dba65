"""Discovery of the IDE endpoint (probing and resolution)."""

from .prober import LivenessProber
from .resolver import EndpointResolver
from .types import Endpoint, ProbeResult

__all__ = [
    "Endpoint",
    "ProbeResult",
    "LivenessProber",
    "EndpointResolver",
]
