"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting form sessions
into routes, plus the wiring that turns settings into live forms.
"""

import logging
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status

from src.adapters.accounts.memory import InMemoryAccountDirectory
from src.adapters.sessions.memory import InMemoryFormSessionStore
from src.config.settings import Settings
from src.domain.auth_form import AuthForm, FormPolicy
from src.domain.exceptions import FormSessionNotFound

logger = logging.getLogger(__name__)


def build_form_policy(settings: Settings) -> FormPolicy:
    """Translate settings into the domain's plain policy object."""
    return FormPolicy(
        max_email_checks=settings.max_email_checks,
        min_password_length=settings.min_password_length,
        login_close_delay=settings.login_close_delay_seconds,
        register_reset_delay=settings.register_reset_delay_seconds,
        reset_password_delay=settings.reset_password_delay_seconds,
    )


def build_session_store(
    settings: Settings, directory: InMemoryAccountDirectory
) -> InMemoryFormSessionStore:
    """
    Create the session store.

    Every form uses the account directory both as lookup service and as
    authentication backend.
    """
    policy = build_form_policy(settings)

    def form_factory() -> AuthForm:
        return AuthForm(
            lookup=directory,
            backend=directory,
            policy=policy,
            on_success=lambda: logger.info("Login form completed"),
        )

    return InMemoryFormSessionStore(form_factory, limit=settings.session_limit)


def get_session_store(request: Request) -> InMemoryFormSessionStore:
    """
    Get session store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.sessions


def get_form(
    session_id: UUID,
    store: InMemoryFormSessionStore = Depends(get_session_store),
) -> AuthForm:
    """Resolve the form for the session id in the path, or 404."""
    try:
        return store.get(session_id)
    except FormSessionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form session not found",
        ) from None
