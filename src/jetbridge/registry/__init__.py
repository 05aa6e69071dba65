"""Tool registry: default catalog merged with the IDE's own listing."""

from .catalog import DEFAULT_TOOLS, get_default_tool
from .registry import ToolRegistry, decode_tool_listing, merge_tools

__all__ = [
    "DEFAULT_TOOLS",
    "get_default_tool",
    "ToolRegistry",
    "decode_tool_listing",
    "merge_tools",
]
