"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Mocked lookup service and authentication backend ports
- A form policy with zero post-success delays
- Ready-to-use forms in login and register mode
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.domain.auth_form import AuthForm, FormPolicy
from src.domain.ports import BackendResult, FormMode, LookupResult


class GatedLookup:
    """EmailLookup that holds every call until ``release`` is set."""

    def __init__(self, result: LookupResult | None = None) -> None:
        self.result = result or LookupResult(exists=False)
        self.release = asyncio.Event()
        self.calls: list[str] = []

    async def check_email_exists(self, email: str) -> LookupResult:
        self.calls.append(email)
        await self.release.wait()
        return self.result


@pytest.fixture
def lookup() -> AsyncMock:
    """Lookup port reporting every email as available."""
    lookup = AsyncMock()
    lookup.check_email_exists.return_value = LookupResult(exists=False)
    return lookup


@pytest.fixture
def backend() -> AsyncMock:
    """Authentication backend port where every call succeeds."""
    backend = AsyncMock()
    backend.login.return_value = BackendResult()
    backend.register.return_value = BackendResult()
    backend.reset_password.return_value = BackendResult()
    return backend


@pytest.fixture
def policy() -> FormPolicy:
    """Default limits, no waiting after a successful submission."""
    return FormPolicy(login_close_delay=0, register_reset_delay=0, reset_password_delay=0)


@pytest.fixture
def form(lookup: AsyncMock, backend: AsyncMock, policy: FormPolicy) -> AuthForm:
    """Fresh form in login mode."""
    return AuthForm(lookup=lookup, backend=backend, policy=policy)


@pytest.fixture
def register_form(form: AuthForm) -> AuthForm:
    """Form in register mode with a valid, unchecked email and matching passwords."""
    form.switch_mode(FormMode.REGISTER)
    form.change_name("New User")
    form.change_email("  New@Example.com ")
    form.change_password("secret1")
    form.change_confirm_password("secret1")
    return form
