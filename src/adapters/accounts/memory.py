"""
In-memory account directory - Implements EmailLookup and AuthBackend.

A demo backend for local runs and tests. Accounts live in a dict keyed by
normalized email; passwords are stored as bcrypt hashes.

Error messages mirror the ones a hosted auth provider returns, so the
form's friendlier remapping ("Invalid login credentials",
"already registered") is exercised end to end.

Timing Oracle Prevention:
------------------------
``login`` always runs a bcrypt comparison, against a pre-computed dummy
hash when the email is unknown, so response time does not reveal whether
an account exists. ``reset_password`` reports success for unknown emails
for the same reason.
"""

import asyncio
import logging
import secrets
from dataclasses import dataclass

import bcrypt

from src.adapters.smtp.console import ConsoleResetMailer
from src.domain.ports import BackendError, BackendResult, LookupResult

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid login credentials"
ALREADY_REGISTERED = "User already registered"

# Pre-computed bcrypt hash for timing oracle prevention.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10))


@dataclass
class _Account:
    password_hash: bytes
    name: str


class InMemoryAccountDirectory:
    """
    Implements EmailLookup and AuthBackend protocols in memory.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Callers pass normalized emails; the directory does not normalize.
    """

    def __init__(self, mailer: ConsoleResetMailer | None = None, bcrypt_cost: int = 10) -> None:
        self._mailer = mailer or ConsoleResetMailer()
        self._bcrypt_cost = bcrypt_cost
        self._accounts: dict[str, _Account] = {}
        self._lock = asyncio.Lock()

    def __contains__(self, email: str) -> bool:
        return email in self._accounts

    async def check_email_exists(self, email: str) -> LookupResult:
        return LookupResult(exists=email in self._accounts)

    async def login(self, email: str, password: str) -> BackendResult:
        account = self._accounts.get(email)
        stored = account.password_hash if account is not None else _DUMMY_BCRYPT_HASH
        matches = await asyncio.to_thread(bcrypt.checkpw, password.encode(), stored)
        if account is None or not matches:
            return BackendResult(BackendError(INVALID_CREDENTIALS))
        return BackendResult()

    async def register(self, email: str, password: str, name: str) -> BackendResult:
        """
        Create an account.

        The existence check and the insert happen under one lock, so two
        concurrent registrations for the same email cannot both succeed.
        """
        password_hash = await asyncio.to_thread(
            bcrypt.hashpw, password.encode(), bcrypt.gensalt(rounds=self._bcrypt_cost)
        )
        async with self._lock:
            if email in self._accounts:
                return BackendResult(BackendError(ALREADY_REGISTERED))
            self._accounts[email] = _Account(password_hash=password_hash, name=name)
        logger.info("Account created for %s", email)
        return BackendResult()

    async def reset_password(self, email: str) -> BackendResult:
        if email in self._accounts:
            self._mailer.send_password_reset(email, secrets.token_urlsafe(32))
        else:
            logger.debug("Password reset requested for unknown email %s", email)
        return BackendResult()
