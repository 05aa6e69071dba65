"""Data types for endpoint discovery."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote


@dataclass(frozen=True)
class Endpoint:
    """Network address believed to reach the IDE's automation API.

    Attributes:
        host: Loopback-style host name or address
        port: TCP port of the IDE's built-in web server
        path_prefix: Path under which the MCP endpoints are served
    """

    host: str
    port: int
    path_prefix: str = "/api/mcp"

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}{self.path_prefix}"

    def url_for(self, name: str) -> str:
        """URL of a named resource under this endpoint (``list_tools``, a tool name).

        The name is always a single path segment.
        """
        return f"{self.base_url}/{quote(name, safe='')}"

    def __str__(self) -> str:
        return self.base_url


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single liveness probe.

    Attributes:
        endpoint: The candidate that was probed
        alive: Whether the backend answered with a success status
        fingerprint: Raw response body on success, used only for equality checks
        status: HTTP status if a response was received
    """

    endpoint: Endpoint
    alive: bool
    fingerprint: Optional[str] = None
    status: Optional[int] = None

    def __repr__(self) -> str:
        state = "alive" if self.alive else "dead"
        status_str = f" status={self.status}" if self.status is not None else ""
        return f"<ProbeResult {self.endpoint} {state}{status_str}>"
