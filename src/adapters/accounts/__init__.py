"""Account adapters - Lookup service and authentication backend implementations."""

from .memory import InMemoryAccountDirectory

__all__ = ["InMemoryAccountDirectory"]
