"""Utility modules (logging)."""

from .logging import configure_logging, preview

__all__ = ["configure_logging", "preview"]
