"""
Credential form - Submission gate and per-mode orchestration.

``AuthForm`` owns everything a login / registration / password-recovery
form needs beyond rendering: field values, the current mode, the
availability checker, user-facing messages and the loading flag.

Submission Gate
===============

Submitting is a no-op (unsuccessful outcome, no collaborator called) when:
- a submission is already in flight
- an availability check is in flight
- the email fails validation
- the mode is REGISTER and the email is known to exist

Registration Race Guard
=======================

The blur-time check is advisory and may be stale by the time the user
submits. Right before calling the registration backend the form runs one
more lookup (never attempt-limited, never stored). Only a clear answer
lets registration through.

Every submission path clears the loading flag in ``finally`` and converts
unexpected faults into a message, so the form can never be left disabled.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from . import messages
from .availability import DEFAULT_MAX_CHECKS, AvailabilityChecker
from .email_validation import EmailValidationResult, normalize_email, validate_email
from .ports import AuthBackend, AvailabilityStatus, EmailLookup, FormMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormPolicy:
    """Tunable limits and delays for a form instance."""

    max_email_checks: int = DEFAULT_MAX_CHECKS
    min_password_length: int = 6
    login_close_delay: float = 1.0
    register_reset_delay: float = 2.0
    reset_password_delay: float = 3.0


@dataclass
class FormFields:
    """Raw field values as typed by the user."""

    email: str = ""
    password: str = ""
    confirm_password: str = ""
    name: str = ""


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of a submit action, surfaced to the user."""

    success: bool
    message: str


class AuthForm:
    """
    Stateful controller for the credential form.

    Args:
        lookup: Email-existence lookup port
        backend: Authentication backend port
        policy: Limits and delays (defaults to ``FormPolicy()``)
        on_close: Called whenever the form is closed
        on_success: Called after a successful login, once the form closed
    """

    def __init__(
        self,
        lookup: EmailLookup,
        backend: AuthBackend,
        policy: FormPolicy | None = None,
        on_close: Callable[[], None] | None = None,
        on_success: Callable[[], None] | None = None,
    ) -> None:
        self.policy = policy or FormPolicy()
        self._backend = backend
        self._checker = AvailabilityChecker(lookup, self.policy.max_email_checks)
        self.on_close = on_close
        self.on_success = on_success
        self.mode = FormMode.LOGIN
        self.is_open = True
        self._followup: asyncio.Task | None = None
        self._generation = 0
        self._reset_state()

    # -- read-only views -------------------------------------------------

    @property
    def status(self) -> AvailabilityStatus:
        return self._checker.status

    @property
    def attempts(self) -> int:
        return self._checker.attempts

    @property
    def followup(self) -> asyncio.Task | None:
        """Pending post-success transition, if any."""
        return self._followup

    def blocked_reason(self) -> str | None:
        """Why submitting is currently not allowed, or None if it is."""
        if self.loading:
            return messages.SUBMISSION_IN_FLIGHT
        if self.status is AvailabilityStatus.CHECKING:
            return messages.CHECK_IN_FLIGHT
        validation = validate_email(self.fields.email)
        if not validation.is_valid:
            return validation.error or messages.INVALID_EMAIL
        if self.mode is FormMode.REGISTER and self.status is AvailabilityStatus.EXISTS:
            return messages.EMAIL_TAKEN
        return None

    @property
    def can_submit(self) -> bool:
        return self.blocked_reason() is None

    # -- field events ----------------------------------------------------

    def change_email(self, value: str) -> None:
        """Email input changed: revalidate and drop any availability verdict."""
        self.fields.email = value
        self.error = None
        self._checker.email_changed()
        if value:
            self.email_validation = validate_email(value)
        else:
            self.email_validation = EmailValidationResult(False)

    def change_password(self, value: str) -> None:
        self.fields.password = value

    def change_confirm_password(self, value: str) -> None:
        self.fields.confirm_password = value

    def change_name(self, value: str) -> None:
        self.fields.name = value

    async def blur_email(self) -> None:
        """
        Email field lost focus: run the advisory availability check.

        Only registration checks availability, and only for a non-empty,
        valid email that has no verdict yet. Exhausted attempts surface a
        rate-limit message instead of issuing a lookup.
        """
        if self.mode is not FormMode.REGISTER or not self.fields.email:
            return
        if not self.email_validation.is_valid or self.status is not AvailabilityStatus.IDLE:
            return

        self.error = None
        message = await self._checker.check(normalize_email(self.fields.email))
        if message is not None:
            self.error = message

    # -- mode / lifecycle ------------------------------------------------

    def switch_mode(self, mode: FormMode) -> None:
        """Switch mode and reset the whole form."""
        self._cancel_followup()
        self.mode = mode
        self._reset_state()
        logger.debug("Form switched to %s mode", mode.value)

    def close(self) -> None:
        """Close the form, resetting it back to a fresh login form."""
        self._cancel_followup()
        self._reset_state()
        self.mode = FormMode.LOGIN
        self.is_open = False
        if self.on_close is not None:
            self.on_close()

    # -- submission ------------------------------------------------------

    async def submit(self) -> SubmissionOutcome:
        """
        Submit the form in its current mode.

        Returns:
            SubmissionOutcome; failures are also stored in ``error`` and
            successes in ``success``
        """
        blocked = self.blocked_reason()
        if blocked is not None:
            if not self.loading and self.status is not AvailabilityStatus.CHECKING:
                self.success = None
                self.error = blocked
            logger.debug("Submission blocked: %s", blocked)
            return SubmissionOutcome(False, blocked)

        mode = self.mode
        fields = replace(self.fields)
        generation = self._generation
        email = normalize_email(fields.email)

        self.error = None
        self.success = None
        self.loading = True
        try:
            if mode is FormMode.LOGIN:
                outcome = await self._login(email, fields)
            elif mode is FormMode.REGISTER:
                outcome = await self._register(email, fields)
            else:
                outcome = await self._reset_password(email)
        except Exception as exc:
            logger.exception("Unexpected failure during %s submission", mode.value)
            outcome = SubmissionOutcome(False, messages.UNEXPECTED_ERROR.format(error=exc))
        finally:
            self.loading = False

        if generation != self._generation:
            logger.debug("Form was reset during %s submission; outcome dropped", mode.value)
            return outcome

        if outcome.success:
            self.success = outcome.message
            self._schedule_followup(mode)
        else:
            self.error = outcome.message
        return outcome

    async def _login(self, email: str, fields: FormFields) -> SubmissionOutcome:
        result = await self._backend.login(email, fields.password)
        if result.error is not None:
            logger.warning("Login failed for %s: %s", email, result.error.message)
            if messages.INVALID_CREDENTIALS_MARKER in result.error.message:
                return SubmissionOutcome(False, messages.LOGIN_INVALID_CREDENTIALS)
            return SubmissionOutcome(False, result.error.message)

        logger.info("Login succeeded for %s", email)
        return SubmissionOutcome(True, messages.LOGIN_SUCCESS)

    async def _register(self, email: str, fields: FormFields) -> SubmissionOutcome:
        if fields.password != fields.confirm_password:
            return SubmissionOutcome(False, messages.PASSWORD_MISMATCH)
        min_length = self.policy.min_password_length
        if len(fields.password) < min_length:
            return SubmissionOutcome(
                False, messages.PASSWORD_TOO_SHORT.format(min_length=min_length)
            )

        try:
            final = await self._checker.verify(email)
        except Exception:
            logger.exception("Final availability check crashed for %s", email)
            return SubmissionOutcome(False, messages.FINAL_CHECK_UNEXPECTED)
        if final.error:
            logger.warning("Final availability check failed for %s: %s", email, final.error)
            return SubmissionOutcome(False, messages.FINAL_CHECK_FAILED.format(error=final.error))
        if final.exists:
            logger.info("Email %s was registered since the blur check", email)
            return SubmissionOutcome(False, messages.FINAL_CHECK_TAKEN)

        result = await self._backend.register(email, fields.password, fields.name)
        if result.error is not None:
            logger.warning("Registration failed for %s: %s", email, result.error.message)
            if messages.ALREADY_REGISTERED_MARKER in result.error.message:
                return SubmissionOutcome(False, messages.REGISTER_ALREADY_REGISTERED)
            return SubmissionOutcome(
                False, messages.REGISTER_FAILED.format(error=result.error.message)
            )

        logger.info("Registered %s", email)
        return SubmissionOutcome(True, messages.REGISTER_SUCCESS)

    async def _reset_password(self, email: str) -> SubmissionOutcome:
        result = await self._backend.reset_password(email)
        if result.error is not None:
            logger.warning("Password reset failed for %s: %s", email, result.error.message)
            return SubmissionOutcome(False, result.error.message)

        logger.info("Password reset requested for %s", email)
        return SubmissionOutcome(True, messages.RESET_SUCCESS)

    # -- internals -------------------------------------------------------

    def _reset_state(self) -> None:
        self._generation += 1
        self.fields = FormFields()
        self.email_validation = EmailValidationResult(False)
        self.error: str | None = None
        self.success: str | None = None
        self.loading = False
        self._checker.reset()

    def _schedule_followup(self, mode: FormMode) -> None:
        if mode is FormMode.LOGIN:
            delay, action = self.policy.login_close_delay, self._finish_login
        elif mode is FormMode.REGISTER:
            delay, action = self.policy.register_reset_delay, self._return_to_login
        else:
            delay, action = self.policy.reset_password_delay, self._return_to_login
        self._followup = asyncio.create_task(self._run_followup(delay, action))

    async def _run_followup(self, delay: float, action: Callable[[], None]) -> None:
        await asyncio.sleep(delay)
        # Cleared first so the reset inside action() does not cancel this task
        self._followup = None
        try:
            action()
        except Exception:
            logger.exception("Post-submit follow-up failed")

    def _cancel_followup(self) -> None:
        if self._followup is not None:
            self._followup.cancel()
            self._followup = None

    def _finish_login(self) -> None:
        self.close()
        if self.on_success is not None:
            self.on_success()

    def _return_to_login(self) -> None:
        self.switch_mode(FormMode.LOGIN)
