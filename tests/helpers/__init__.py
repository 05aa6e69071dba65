"""Test helpers."""

from jetbridge.discovery import Endpoint

from .fake_ide import FakeIDE, FakePort, tool_entry
from .timing import FakeClock, RecordingSleep

HOST = "127.0.0.1"
FIRST_PORT = 63342
LAST_PORT = 63352


def endpoint_at(port: int) -> Endpoint:
    return Endpoint(host=HOST, port=port)


__all__ = [
    "FakeIDE",
    "FakePort",
    "tool_entry",
    "FakeClock",
    "RecordingSleep",
    "endpoint_at",
    "HOST",
    "FIRST_PORT",
    "LAST_PORT",
]
