"""
Domain exceptions - Semantic error types for the credential form.

These never reach the user directly: the form converts them into
user-visible messages at its outer boundary.
"""


class AuthFormError(Exception):
    """Base class for credential form domain errors."""

    pass


class InvalidCheckTransition(AuthFormError):
    """Availability state does not allow the requested transition."""

    pass


class EmailCheckLimitReached(AuthFormError):
    """Blur-time lookups for this form cycle are exhausted."""

    pass


class FormSessionNotFound(AuthFormError):
    """No form session is stored under the given identifier."""

    pass
