"""
Email availability checker - Blur-time lookup state machine.

The availability verdict, the attempt counter and the lookup that
produced the verdict live in one immutable value, ``EmailCheckState``.
Every transition returns a new value, so combinations such as
"checking with no email" cannot be represented and a re-render never
sees a half-applied update.

State Machine
=============

    any       -> IDLE       edited()   email input changed
    IDLE      -> CHECKING   start()    blur-time lookup issued (counted)
    CHECKING  -> EXISTS     resolved() lookup: email registered
    CHECKING  -> AVAILABLE  resolved() lookup: email free
    CHECKING  -> IDLE       failed()   lookup error (attempt stays counted)

Lookups are keyed by the normalized email and a per-lookup ticket. A
result whose key no longer matches the current state is stale (the
email was edited or the form was reset meanwhile) and is dropped.

The submit-time race-guard lookup goes through ``verify()``: it is never
counted and never touches the state.
"""

import itertools
import logging
from dataclasses import dataclass, replace

from . import messages
from .exceptions import EmailCheckLimitReached, InvalidCheckTransition
from .ports import AvailabilityStatus, EmailLookup, LookupResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHECKS = 3


@dataclass(frozen=True)
class EmailCheckState:
    """Availability verdict plus the attempt counter that bounds it."""

    status: AvailabilityStatus = AvailabilityStatus.IDLE
    attempts: int = 0
    email: str | None = None
    ticket: int | None = None

    def __post_init__(self) -> None:
        if self.attempts < 0:
            raise InvalidCheckTransition(f"negative attempt count: {self.attempts}")
        keyed = self.email is not None and self.ticket is not None
        if self.status is AvailabilityStatus.IDLE:
            if self.email is not None or self.ticket is not None:
                raise InvalidCheckTransition("idle state cannot carry a lookup key")
        elif not keyed:
            raise InvalidCheckTransition(f"{self.status.value} state requires a lookup key")

    def edited(self) -> "EmailCheckState":
        """Email input changed: drop any verdict, keep the counter."""
        return EmailCheckState(attempts=self.attempts)

    def start(self, email: str, ticket: int, limit: int) -> "EmailCheckState":
        if self.status is not AvailabilityStatus.IDLE:
            raise InvalidCheckTransition(f"cannot start a check while {self.status.value}")
        if self.attempts >= limit:
            raise EmailCheckLimitReached(email)
        return EmailCheckState(
            status=AvailabilityStatus.CHECKING,
            attempts=self.attempts + 1,
            email=email,
            ticket=ticket,
        )

    def resolved(self, exists: bool) -> "EmailCheckState":
        if self.status is not AvailabilityStatus.CHECKING:
            raise InvalidCheckTransition(f"cannot resolve a check while {self.status.value}")
        status = AvailabilityStatus.EXISTS if exists else AvailabilityStatus.AVAILABLE
        return replace(self, status=status)

    def failed(self) -> "EmailCheckState":
        if self.status is not AvailabilityStatus.CHECKING:
            raise InvalidCheckTransition(f"cannot fail a check while {self.status.value}")
        return EmailCheckState(attempts=self.attempts)

    def owns(self, email: str, ticket: int) -> bool:
        """True if a result for (email, ticket) still belongs to this state."""
        return (
            self.status is AvailabilityStatus.CHECKING
            and self.email == email
            and self.ticket == ticket
        )


class AvailabilityChecker:
    """
    Drives ``EmailCheckState`` against an ``EmailLookup`` port.

    Owned by exactly one form; all mutations happen between awaits on
    the event loop, so no locking is needed.
    """

    def __init__(self, lookup: EmailLookup, max_checks: int = DEFAULT_MAX_CHECKS) -> None:
        self._lookup = lookup
        self.max_checks = max_checks
        self.state = EmailCheckState()
        self._tickets = itertools.count(1)

    @property
    def status(self) -> AvailabilityStatus:
        return self.state.status

    @property
    def attempts(self) -> int:
        return self.state.attempts

    def email_changed(self) -> None:
        self.state = self.state.edited()

    def reset(self) -> None:
        self.state = EmailCheckState()

    async def check(self, email: str) -> str | None:
        """
        Run a counted blur-time lookup for a normalized email.

        Args:
            email: Normalized email address

        Returns:
            Message to surface, or None when there is nothing to report
            (verdict applied, or the result was stale and discarded)
        """
        ticket = next(self._tickets)
        try:
            self.state = self.state.start(email, ticket, self.max_checks)
        except EmailCheckLimitReached:
            logger.warning("Email check limit reached (%d attempts)", self.state.attempts)
            return messages.CHECK_RATE_LIMITED

        logger.debug("Checking email availability (attempt %d): %s", self.state.attempts, email)
        try:
            result = await self._query(email)
        except Exception:
            logger.exception("Unexpected failure while checking %s", email)
            return self._settle(email, ticket, None, messages.CHECK_UNEXPECTED)

        if result.error:
            logger.warning("Email lookup failed for %s: %s", email, result.error)
            return self._settle(
                email, ticket, None, messages.CHECK_FAILED.format(error=result.error)
            )
        return self._settle(email, ticket, result.exists, None)

    async def verify(self, email: str) -> LookupResult:
        """
        Authoritative pre-submit lookup.

        Not attempt-limited and leaves the state untouched. Errors from the
        lookup service propagate to the caller.
        """
        logger.debug("Final availability check for %s", email)
        return await self._query(email)

    async def _query(self, email: str) -> LookupResult:
        return await self._lookup.check_email_exists(email)

    def _settle(
        self, email: str, ticket: int, exists: bool | None, message: str | None
    ) -> str | None:
        if not self.state.owns(email, ticket):
            logger.debug("Discarding stale availability result for %s (ticket %d)", email, ticket)
            return None
        if exists is None:
            self.state = self.state.failed()
            return message
        self.state = self.state.resolved(exists)
        logger.debug("Email %s is %s", email, self.state.status.value)
        return None
