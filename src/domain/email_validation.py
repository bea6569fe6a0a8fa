"""
Email field validation - Syntax classification and normalization.

Both functions are pure: no network access (deliverability checks are
disabled) and no shared state, so they are safe to call on every
keystroke as well as at submission time.
"""

from dataclasses import dataclass

import email_validator

EMAIL_REQUIRED = "Email is required."
EMAIL_MISSING_AT = "Email must contain an @ sign."
EMAIL_MULTIPLE_AT = "Email must contain a single @ sign."
EMAIL_MISSING_LOCAL = "Email is missing the part before the @ sign."
EMAIL_MISSING_DOMAIN = "Email is missing a domain after the @ sign."
EMAIL_DOMAIN_NO_DOT = "Email domain must include a dot, like example.com."


@dataclass(frozen=True)
class EmailValidationResult:
    """Validity verdict for a raw email value."""

    is_valid: bool
    error: str | None = None


def normalize_email(raw: str) -> str:
    """
    Canonical form used for comparisons and every backend call.

    Applies: strip whitespace + lowercase. Idempotent.
    """
    return raw.strip().lower()


def validate_email(raw: str) -> EmailValidationResult:
    """
    Classify an email value as syntactically valid or not.

    Cheap structural checks run first so the common mistakes get a
    specific message; anything subtler is delegated to email-validator.

    Args:
        raw: Email exactly as typed (surrounding whitespace is ignored)

    Returns:
        EmailValidationResult with a human-readable error when invalid
    """
    candidate = raw.strip()
    if not candidate:
        return EmailValidationResult(False, EMAIL_REQUIRED)

    at_count = candidate.count("@")
    if at_count == 0:
        return EmailValidationResult(False, EMAIL_MISSING_AT)
    if at_count > 1:
        return EmailValidationResult(False, EMAIL_MULTIPLE_AT)

    local, domain = candidate.split("@")
    if not local:
        return EmailValidationResult(False, EMAIL_MISSING_LOCAL)
    if not domain:
        return EmailValidationResult(False, EMAIL_MISSING_DOMAIN)
    if "." not in domain:
        return EmailValidationResult(False, EMAIL_DOMAIN_NO_DOT)

    try:
        email_validator.validate_email(candidate, check_deliverability=False)
    except email_validator.EmailNotValidError as exc:
        return EmailValidationResult(False, str(exc))

    return EmailValidationResult(True)
