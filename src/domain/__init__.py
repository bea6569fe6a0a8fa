"""
Domain layer - Pure form logic with zero framework imports.

This package contains the credential form engine: email validation, the
availability state machine and the submission gate. It defines its own
port interfaces for the lookup service and the authentication backend.
"""

from .auth_form import AuthForm, FormFields, FormPolicy, SubmissionOutcome
from .availability import AvailabilityChecker, EmailCheckState
from .email_validation import EmailValidationResult, normalize_email, validate_email
from .exceptions import (
    AuthFormError,
    EmailCheckLimitReached,
    FormSessionNotFound,
    InvalidCheckTransition,
)
from .ports import (
    AuthBackend,
    AvailabilityStatus,
    BackendError,
    BackendResult,
    EmailLookup,
    FormMode,
    LookupResult,
)

__all__ = [
    "AuthBackend",
    "AuthForm",
    "AuthFormError",
    "AvailabilityChecker",
    "AvailabilityStatus",
    "BackendError",
    "BackendResult",
    "EmailCheckLimitReached",
    "EmailCheckState",
    "EmailLookup",
    "EmailValidationResult",
    "FormFields",
    "FormMode",
    "FormPolicy",
    "FormSessionNotFound",
    "InvalidCheckTransition",
    "LookupResult",
    "SubmissionOutcome",
    "normalize_email",
    "validate_email",
]
