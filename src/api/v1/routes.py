"""
API v1 routes.

Defines REST endpoints that drive a server-side credential form session:
field edits, email blur, mode switches, submission and close.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.adapters.sessions.memory import InMemoryFormSessionStore
from src.api.dependencies import get_form, get_session_store
from src.api.models import (
    ErrorResponse,
    FieldsUpdate,
    FormSnapshot,
    ModeRequest,
    SubmitResponse,
)
from src.domain.auth_form import AuthForm
from src.domain.exceptions import FormSessionNotFound

router = APIRouter(tags=["v1"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Form session not found"}}


@router.post(
    "/sessions",
    response_model=FormSnapshot,
    status_code=status.HTTP_201_CREATED,
    summary="Open a form session",
    description="Create a fresh credential form in login mode.",
)
async def create_session(
    store: InMemoryFormSessionStore = Depends(get_session_store),
) -> FormSnapshot:
    session_id, form = store.create()
    return FormSnapshot.from_form(session_id, form)


@router.get(
    "/sessions/{session_id}",
    response_model=FormSnapshot,
    responses=_NOT_FOUND,
    summary="Get form state",
)
async def get_session(session_id: UUID, form: AuthForm = Depends(get_form)) -> FormSnapshot:
    return FormSnapshot.from_form(session_id, form)


@router.patch(
    "/sessions/{session_id}/fields",
    response_model=FormSnapshot,
    responses=_NOT_FOUND,
    summary="Edit form fields",
    description="Any email edit is revalidated and drops the current availability verdict.",
)
async def update_fields(
    session_id: UUID,
    request_data: FieldsUpdate,
    form: AuthForm = Depends(get_form),
) -> FormSnapshot:
    if request_data.email is not None:
        form.change_email(request_data.email)
    if request_data.password is not None:
        form.change_password(request_data.password)
    if request_data.confirm_password is not None:
        form.change_confirm_password(request_data.confirm_password)
    if request_data.name is not None:
        form.change_name(request_data.name)
    return FormSnapshot.from_form(session_id, form)


@router.post(
    "/sessions/{session_id}/email/blur",
    response_model=FormSnapshot,
    responses=_NOT_FOUND,
    summary="Email field lost focus",
    description="In register mode, checks whether the email is already registered "
    "(at most 3 checks per form cycle).",
)
async def blur_email(session_id: UUID, form: AuthForm = Depends(get_form)) -> FormSnapshot:
    await form.blur_email()
    return FormSnapshot.from_form(session_id, form)


@router.put(
    "/sessions/{session_id}/mode",
    response_model=FormSnapshot,
    responses=_NOT_FOUND,
    summary="Switch form mode",
    description="Switching mode resets all fields, messages and availability checks.",
)
async def switch_mode(
    session_id: UUID,
    request_data: ModeRequest,
    form: AuthForm = Depends(get_form),
) -> FormSnapshot:
    form.switch_mode(request_data.mode)
    return FormSnapshot.from_form(session_id, form)


@router.post(
    "/sessions/{session_id}/submit",
    response_model=SubmitResponse,
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Submission currently not allowed"},
    },
    summary="Submit the form",
)
async def submit(session_id: UUID, form: AuthForm = Depends(get_form)) -> SubmitResponse:
    blocked = form.blocked_reason()
    if blocked is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=blocked)

    outcome = await form.submit()
    return SubmitResponse(
        success=outcome.success,
        message=outcome.message,
        form=FormSnapshot.from_form(session_id, form),
    )


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
    summary="Close the form",
)
async def close_session(
    session_id: UUID,
    store: InMemoryFormSessionStore = Depends(get_session_store),
) -> Response:
    try:
        form = store.remove(session_id)
    except FormSessionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form session not found",
        ) from None
    form.close()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
