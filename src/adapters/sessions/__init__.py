"""Session adapters - Storage for live form instances."""

from .memory import InMemoryFormSessionStore

__all__ = ["InMemoryFormSessionStore"]
