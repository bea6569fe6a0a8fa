"""
Unit tests for API v1 routes.

Tests endpoint responses with mocked ports behind a real session store.
"""

import uuid
from collections.abc import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.sessions.memory import InMemoryFormSessionStore
from src.api.v1.routes import router
from src.domain import messages
from src.domain.auth_form import AuthForm, FormPolicy
from src.domain.ports import BackendError, BackendResult, LookupResult


@pytest.fixture
def app(lookup: AsyncMock, backend: AsyncMock, policy: FormPolicy) -> FastAPI:
    """Create test FastAPI application."""
    test_app = FastAPI()
    test_app.include_router(router, prefix="/v1")
    test_app.state.sessions = InMemoryFormSessionStore(
        lambda: AuthForm(lookup=lookup, backend=backend, policy=policy)
    )
    return test_app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create test client for the application."""
    with TestClient(app) as test_client:
        yield test_client


def open_session(client: TestClient) -> str:
    response = client.post("/v1/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


class TestCreateSession:
    """Tests for POST /v1/sessions endpoint."""

    def test_create_returns_201_login_form(self, client: TestClient) -> None:
        """A new session is an empty login form."""
        response = client.post("/v1/sessions")

        assert response.status_code == 201
        body = response.json()
        assert body["mode"] == "login"
        assert body["email"] == ""
        assert body["availability"] == "idle"
        assert body["attempts"] == 0
        assert body["can_submit"] is False
        assert body["is_open"] is True

    def test_get_session(self, client: TestClient) -> None:
        """GET returns the stored form."""
        session_id = open_session(client)
        response = client.get(f"/v1/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["session_id"] == session_id

    def test_unknown_session_returns_404(self, client: TestClient) -> None:
        """Unknown session ids return 404."""
        response = client.get(f"/v1/sessions/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"detail": "Form session not found"}

    def test_malformed_session_id_returns_422(self, client: TestClient) -> None:
        """Non-UUID ids are rejected by validation."""
        response = client.get("/v1/sessions/not-a-uuid")
        assert response.status_code == 422


class TestUpdateFields:
    """Tests for PATCH /v1/sessions/{id}/fields endpoint."""

    def test_email_is_validated(self, client: TestClient) -> None:
        """Email edits report the validation verdict."""
        session_id = open_session(client)

        response = client.patch(
            f"/v1/sessions/{session_id}/fields", json={"email": "userexample.com"}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["email_validation"]["is_valid"] is False
        assert body["email_validation"]["error"]

    def test_passwords_not_echoed(self, client: TestClient) -> None:
        """Password values never come back in responses."""
        session_id = open_session(client)

        response = client.patch(
            f"/v1/sessions/{session_id}/fields",
            json={"password": "secret1", "confirm_password": "secret1", "name": "Ann"},
        )

        assert "secret1" not in response.text
        assert response.json()["name"] == "Ann"

    def test_lone_surrogate_email_gets_verdict(self, client: TestClient) -> None:
        """An email carrying a lone surrogate gets a validation verdict."""
        session_id = open_session(client)

        response = client.patch(
            f"/v1/sessions/{session_id}/fields",
            content='{"email": "\\ud800@example.com"}',
            headers={"Content-Type": "application/json"},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["email"] == "\\ud800@example.com"
        assert body["email_validation"]["is_valid"] is False
        assert body["can_submit"] is False


class TestBlurEmail:
    """Tests for POST /v1/sessions/{id}/email/blur endpoint."""

    def test_blur_in_register_mode_checks(self, client: TestClient, lookup: AsyncMock) -> None:
        """Register-mode blur marks a taken email as existing."""
        lookup.check_email_exists.return_value = LookupResult(exists=True)
        session_id = open_session(client)
        client.put(f"/v1/sessions/{session_id}/mode", json={"mode": "register"})
        client.patch(f"/v1/sessions/{session_id}/fields", json={"email": "Taken@Example.com"})

        response = client.post(f"/v1/sessions/{session_id}/email/blur")

        body = response.json()
        assert body["availability"] == "exists"
        assert body["attempts"] == 1
        assert body["can_submit"] is False
        lookup.check_email_exists.assert_awaited_once_with("taken@example.com")

    def test_blur_in_login_mode_is_noop(self, client: TestClient, lookup: AsyncMock) -> None:
        """Login-mode blur does not look anything up."""
        session_id = open_session(client)
        client.patch(f"/v1/sessions/{session_id}/fields", json={"email": "a@example.com"})

        response = client.post(f"/v1/sessions/{session_id}/email/blur")

        assert response.json()["availability"] == "idle"
        lookup.check_email_exists.assert_not_awaited()


class TestSwitchMode:
    """Tests for PUT /v1/sessions/{id}/mode endpoint."""

    def test_switch_resets_form(self, client: TestClient) -> None:
        """Switching mode clears fields and checks."""
        session_id = open_session(client)
        client.put(f"/v1/sessions/{session_id}/mode", json={"mode": "register"})
        client.patch(f"/v1/sessions/{session_id}/fields", json={"email": "a@example.com"})
        client.post(f"/v1/sessions/{session_id}/email/blur")

        response = client.put(f"/v1/sessions/{session_id}/mode", json={"mode": "login"})

        body = response.json()
        assert body["mode"] == "login"
        assert body["email"] == ""
        assert body["attempts"] == 0
        assert body["availability"] == "idle"

    def test_unknown_mode_returns_422(self, client: TestClient) -> None:
        """Unknown modes fail validation."""
        session_id = open_session(client)
        response = client.put(f"/v1/sessions/{session_id}/mode", json={"mode": "signup"})
        assert response.status_code == 422


class TestSubmit:
    """Tests for POST /v1/sessions/{id}/submit endpoint."""

    def test_blocked_submission_returns_409(self, client: TestClient, backend: AsyncMock) -> None:
        """Invalid email blocks submission with 409."""
        session_id = open_session(client)
        client.patch(f"/v1/sessions/{session_id}/fields", json={"email": "bad@"})

        response = client.post(f"/v1/sessions/{session_id}/submit")

        assert response.status_code == 409
        assert response.json()["detail"]
        backend.login.assert_not_awaited()

    def test_login_success(self, client: TestClient, backend: AsyncMock) -> None:
        """Successful login returns the success outcome."""
        session_id = open_session(client)
        client.patch(
            f"/v1/sessions/{session_id}/fields",
            json={"email": "user@example.com", "password": "secret1"},
        )

        response = client.post(f"/v1/sessions/{session_id}/submit")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == messages.LOGIN_SUCCESS
        assert body["form"]["loading"] is False
        backend.login.assert_awaited_once_with("user@example.com", "secret1")

    def test_login_failure_is_200_with_message(
        self, client: TestClient, backend: AsyncMock
    ) -> None:
        """Backend failures are outcomes, not HTTP errors."""
        backend.login.return_value = BackendResult(BackendError("Invalid login credentials"))
        session_id = open_session(client)
        client.patch(f"/v1/sessions/{session_id}/fields", json={"email": "user@example.com"})

        response = client.post(f"/v1/sessions/{session_id}/submit")

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is False
        assert body["message"] == messages.LOGIN_INVALID_CREDENTIALS
        assert body["form"]["error"] == messages.LOGIN_INVALID_CREDENTIALS

    def test_register_race_guard_aborts(
        self, client: TestClient, lookup: AsyncMock, backend: AsyncMock
    ) -> None:
        """A taken email at submit time aborts registration."""
        lookup.check_email_exists.side_effect = [
            LookupResult(exists=False),
            LookupResult(exists=True),
        ]
        session_id = open_session(client)
        client.put(f"/v1/sessions/{session_id}/mode", json={"mode": "register"})
        client.patch(
            f"/v1/sessions/{session_id}/fields",
            json={
                "email": "new@example.com",
                "password": "secret1",
                "confirm_password": "secret1",
                "name": "New",
            },
        )
        client.post(f"/v1/sessions/{session_id}/email/blur")

        response = client.post(f"/v1/sessions/{session_id}/submit")

        assert response.json()["message"] == messages.FINAL_CHECK_TAKEN
        backend.register.assert_not_awaited()


class TestCloseSession:
    """Tests for DELETE /v1/sessions/{id} endpoint."""

    def test_close_returns_204(self, client: TestClient) -> None:
        """Closing removes the session."""
        session_id = open_session(client)

        response = client.delete(f"/v1/sessions/{session_id}")

        assert response.status_code == 204
        assert client.get(f"/v1/sessions/{session_id}").status_code == 404

    def test_close_unknown_returns_404(self, client: TestClient) -> None:
        """Closing an unknown session returns 404."""
        response = client.delete(f"/v1/sessions/{uuid.uuid4()}")
        assert response.status_code == 404
