"""Shared models for tool descriptors and invocation results."""

from .tools import *  # noqa: F403 - intentional re-export

__all__ = [name for name in dir() if not name.startswith("_")]
