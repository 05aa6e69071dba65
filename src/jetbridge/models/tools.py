from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


def _empty_schema() -> Dict[str, Any]:
    return {"type": "object", "properties": {}}


# Tool catalog
@dataclass(frozen=True)
class ToolDescriptor:
    """A named callable capability with a declared input schema.

    Identity is ``name``; two descriptors with the same name describe the
    same tool. Equality compares every field, which is what the registry
    uses to decide whether a remote entry overrides a static one.
    """

    name: str
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=_empty_schema)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToolDescriptor:
        """Build a descriptor from the backend's JSON shape.

        Raises:
            ValueError: If ``name`` is missing or not a string
        """
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"Tool entry has no usable name: {data!r}")

        description = data.get("description")
        if not isinstance(description, str):
            description = ""

        schema = data.get("inputSchema")
        if not isinstance(schema, dict):
            schema = _empty_schema()

        return cls(name=name, description=description, input_schema=schema)


@dataclass(frozen=True)
class ToolRegistrySnapshot:
    """Immutable, timestamped view of remotely discovered tools."""

    entries: Mapping[str, ToolDescriptor]
    fetched_at: float  # monotonic seconds

    def age(self, now: float) -> float:
        return now - self.fetched_at

    def is_valid(self, now: float, ttl: float) -> bool:
        return self.age(now) < ttl


# Invocation
@dataclass(frozen=True)
class Invocation:
    tool_name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InvocationResult:
    """Translated outcome of a single tool call."""

    text: str
    is_error: bool = False
    status: Optional[int] = None  # HTTP status when a transport failure occurred

    @classmethod
    def error(cls, message: str, status: Optional[int] = None) -> InvocationResult:
        return cls(text=message, is_error=True, status=status)
