"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.auth_form import AuthForm
from src.domain.ports import AvailabilityStatus, FormMode


def _echoable(text: str) -> str:
    """Escape lone surrogates so client-typed text can be echoed as UTF-8 JSON."""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


class FieldsUpdate(BaseModel):
    """Request model for field edits. Omitted fields are left untouched."""

    email: str | None = Field(default=None, description="Raw email as typed")
    password: str | None = None
    confirm_password: str | None = None
    name: str | None = None


class ModeRequest(BaseModel):
    """Request model for switching form mode."""

    mode: FormMode


class EmailValidationModel(BaseModel):
    """Email syntax verdict."""

    is_valid: bool
    error: str | None = None


class FormSnapshot(BaseModel):
    """Response model describing a form session. Passwords are never echoed."""

    session_id: UUID
    mode: FormMode
    email: str
    name: str
    email_validation: EmailValidationModel
    availability: AvailabilityStatus
    attempts: int
    loading: bool
    error: str | None = None
    success: str | None = None
    can_submit: bool
    is_open: bool

    @classmethod
    def from_form(cls, session_id: UUID, form: AuthForm) -> "FormSnapshot":
        return cls(
            session_id=session_id,
            mode=form.mode,
            email=_echoable(form.fields.email),
            name=_echoable(form.fields.name),
            email_validation=EmailValidationModel(
                is_valid=form.email_validation.is_valid,
                error=form.email_validation.error,
            ),
            availability=form.status,
            attempts=form.attempts,
            loading=form.loading,
            error=form.error,
            success=form.success,
            can_submit=form.can_submit,
            is_open=form.is_open,
        )


class SubmitResponse(BaseModel):
    """Response model for a submission that passed the gate."""

    success: bool
    message: str
    form: FormSnapshot


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
