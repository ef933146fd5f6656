"""Form submission endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from intake.auth import CurrentUser
from intake.database import DbSession
from intake.schemas.responses import ErrorResponse
from intake.schemas.submission import FormSubmissionCreate, FormSubmissionRead
from intake.services import submission_service

router = APIRouter(tags=["submissions"])


@router.post(
    "/form-submissions",
    response_model=FormSubmissionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the intake form",
    responses={400: {"model": ErrorResponse}},
)
async def create_form_submission(
    submission_in: FormSubmissionCreate,
    db: DbSession,
) -> FormSubmissionRead:
    """
    Store a completed intake form.

    Public endpoint. Fields are validated with the same rules the form
    wizard applies; failures return 400 with one message per field.
    """
    submission = await submission_service.create_submission(db, submission_in)
    return FormSubmissionRead.model_validate(submission)


@router.get(
    "/admin/submissions",
    response_model=list[FormSubmissionRead],
    summary="List form submissions",
)
async def list_form_submissions(
    db: DbSession,
    _user: CurrentUser,
    search: Annotated[str | None, Query(max_length=255, description="Match name or email")] = None,
) -> list[FormSubmissionRead]:
    """All submissions, newest first."""
    submissions = await submission_service.list_submissions(db, search=search)
    return [FormSubmissionRead.model_validate(s) for s in submissions]
