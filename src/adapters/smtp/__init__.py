"""Mail adapters - Outbound notifications."""

from .console import ConsoleResetMailer

__all__ = ["ConsoleResetMailer"]
