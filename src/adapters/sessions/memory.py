"""
In-memory form session store.

Keeps live ``AuthForm`` instances keyed by UUID so that stateless HTTP
requests can drive the same form. The store is bounded: when full, the
oldest session is closed and evicted.
"""

import logging
import uuid
from collections import OrderedDict
from collections.abc import Callable

from src.domain.auth_form import AuthForm
from src.domain.exceptions import FormSessionNotFound

logger = logging.getLogger(__name__)


class InMemoryFormSessionStore:
    """Bounded mapping of session id -> AuthForm."""

    def __init__(self, form_factory: Callable[[], AuthForm], limit: int = 1000) -> None:
        if limit < 1:
            raise ValueError(f"Session limit must be at least 1, got {limit}")
        self._form_factory = form_factory
        self._limit = limit
        self._sessions: OrderedDict[uuid.UUID, AuthForm] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> tuple[uuid.UUID, AuthForm]:
        while len(self._sessions) >= self._limit:
            evicted_id, evicted = self._sessions.popitem(last=False)
            evicted.close()
            logger.info("Evicted form session %s", evicted_id)

        session_id = uuid.uuid4()
        form = self._form_factory()
        self._sessions[session_id] = form
        return session_id, form

    def get(self, session_id: uuid.UUID) -> AuthForm:
        """
        Fetch a live form.

        Raises:
            FormSessionNotFound: If the id is unknown or was evicted
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise FormSessionNotFound(str(session_id)) from None

    def remove(self, session_id: uuid.UUID) -> AuthForm:
        form = self.get(session_id)
        del self._sessions[session_id]
        return form

    def close_all(self) -> None:
        for form in self._sessions.values():
            form.close()
        self._sessions.clear()
