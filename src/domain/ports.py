"""
Port interfaces - Protocol definitions for the form's collaborators.

This module defines the enums and result types shared across the domain,
and the interfaces (ports) the form requires from the outside world:
the email-existence lookup service and the authentication backend.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class FormMode(str, Enum):
    """
    Credential form modes.

    Exactly one mode is active at a time. Switching modes resets the
    whole form (fields, messages, availability state and attempt counter).
    """

    LOGIN = "login"
    REGISTER = "register"
    FORGOT_PASSWORD = "forgot-password"


class AvailabilityStatus(str, Enum):
    """
    Email availability states.

    State Transitions:
    - any -> IDLE (email edited, lookup failed, form reset)
    - IDLE -> CHECKING (blur-time lookup issued)
    - CHECKING -> EXISTS (lookup says the email is registered)
    - CHECKING -> AVAILABLE (lookup says the email is free)
    """

    IDLE = "idle"
    CHECKING = "checking"
    EXISTS = "exists"
    AVAILABLE = "available"


@dataclass(frozen=True)
class LookupResult:
    """Outcome of an email-existence lookup."""

    exists: bool
    error: str | None = None


@dataclass(frozen=True)
class BackendError:
    """Opaque error reported by the authentication backend."""

    message: str


@dataclass(frozen=True)
class BackendResult:
    """Outcome of a sign-in, registration or password-reset call."""

    error: BackendError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class EmailLookup(Protocol):
    """Port interface for the email-existence lookup service."""

    async def check_email_exists(self, email: str) -> LookupResult:
        """
        Report whether an email address is already registered.

        Args:
            email: Normalized email address

        Returns:
            LookupResult with ``exists`` set, or ``error`` when the lookup
            could not be answered
        """
        ...


class AuthBackend(Protocol):
    """Port interface for the authentication backend."""

    async def login(self, email: str, password: str) -> BackendResult:
        """
        Sign a user in.

        Args:
            email: Normalized email address
            password: Plaintext password

        Returns:
            BackendResult, with ``error`` populated on failure
        """
        ...

    async def register(self, email: str, password: str, name: str) -> BackendResult:
        """
        Create a new account.

        Args:
            email: Normalized email address
            password: Plaintext password
            name: Display name

        Returns:
            BackendResult, with ``error`` populated on failure
        """
        ...

    async def reset_password(self, email: str) -> BackendResult:
        """
        Start the password-recovery flow for an account.

        Args:
            email: Normalized email address

        Returns:
            BackendResult, with ``error`` populated on failure
        """
        ...
