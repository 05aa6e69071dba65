"""Service layer: call dispatch and endpoint refresh."""

from .dispatch import CallDispatcher, translate_envelope
from .scheduler import RefreshScheduler

__all__ = ["CallDispatcher", "RefreshScheduler", "translate_envelope"]
