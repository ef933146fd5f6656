"""Funnel tracking endpoints called by the form as the visitor moves through it."""

from fastapi import APIRouter, status

from intake.database import DbSession
from intake.schemas.analytics import (
    AnalyticsEventCreate,
    AnalyticsEventRead,
    FormSessionRead,
    SessionComplete,
    SessionStart,
)
from intake.schemas.responses import ErrorResponse
from intake.services import tracking_service

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post(
    "/session-start",
    response_model=FormSessionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Start a form session",
    responses={409: {"model": ErrorResponse}},
)
async def start_session(session_in: SessionStart, db: DbSession) -> FormSessionRead:
    session = await tracking_service.start_session(db, session_in.session_id)
    return FormSessionRead.model_validate(session)


@router.post(
    "/event",
    response_model=AnalyticsEventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a wizard event",
)
async def record_event(event_in: AnalyticsEventCreate, db: DbSession) -> AnalyticsEventRead:
    event = await tracking_service.record_event(db, event_in)
    return AnalyticsEventRead.model_validate(event)


@router.patch(
    "/session-complete",
    response_model=FormSessionRead,
    summary="Mark a form session as completed",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def complete_session(complete_in: SessionComplete, db: DbSession) -> FormSessionRead:
    """
    Link the session to the submission it produced.

    - 404 if the session was never started
    - 409 if the session was already completed
    """
    session = await tracking_service.complete_session(db, complete_in)
    return FormSessionRead.model_validate(session)
