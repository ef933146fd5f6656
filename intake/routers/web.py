"""Server-rendered pages: the intake wizard and the admin dashboard.

The wizard keeps its state in the page (hidden inputs) and records each
transition through the tracking service. Tracking is best-effort: a failed
write is logged and the visitor carries on.
"""

import math
import time
import uuid
from pathlib import Path
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.auth import CurrentUser
from intake.database import DbSession
from intake.exceptions import IntakeError
from intake.models import EventType
from intake.schemas.analytics import AnalyticsEventCreate, SessionComplete, TimePeriod
from intake.schemas.submission import FormSubmissionCreate
from intake.services import analytics_service, submission_service, tracking_service
from intake.services.export_service import format_timestamp
from intake.wizard import QUESTIONS, STEP_COUNT, FormWizard, Transition

logger = structlog.get_logger(__name__)

# Template configuration
TEMPLATES_DIR = Path(__file__).parent.parent.parent / "web" / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["web"])

SUBMIT_FAILED_MESSAGE = "There was a problem submitting your form. Please try again."


def format_duration(seconds: float | None) -> str:
    """Render an average completion time as ``Xm Ys``."""
    if seconds is None:
        return "N/A"
    total = int(round(seconds))
    return f"{total // 60}m {total % 60}s"


templates.env.filters["duration"] = format_duration
templates.env.filters["timestamp"] = format_timestamp


async def _track(db: AsyncSession, session_id: str, step: int, event_type: EventType) -> None:
    try:
        async with db.begin_nested():
            await tracking_service.record_event(
                db,
                AnalyticsEventCreate(session_id=session_id, step=step, event_type=event_type),
            )
    except (SQLAlchemyError, IntakeError) as e:
        logger.warning("Analytics tracking failed", session_id=session_id, error=str(e))


async def _start(db: AsyncSession, session_id: str) -> None:
    try:
        await tracking_service.start_session(db, session_id)
    except (SQLAlchemyError, IntakeError) as e:
        logger.warning("Analytics session start failed", session_id=session_id, error=str(e))


async def _complete(
    db: AsyncSession, session_id: str, submission_id: uuid.UUID, started_at: float
) -> None:
    elapsed = max(0, int(time.time() - started_at))
    try:
        async with db.begin_nested():
            await tracking_service.complete_session(
                db,
                SessionComplete(
                    session_id=session_id,
                    submission_id=submission_id,
                    time_to_complete=elapsed,
                ),
            )
    except (SQLAlchemyError, IntakeError) as e:
        logger.warning("Analytics session completion failed", session_id=session_id, error=str(e))


def _render_form(
    request: Request,
    wizard: FormWizard,
    session_id: str,
    started_at: float,
    notice: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "form.html",
        {
            "wizard": wizard,
            "questions": QUESTIONS,
            "session_id": session_id,
            "started_at": started_at,
            "notice": notice,
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
async def form_page(request: Request, db: DbSession) -> HTMLResponse:
    """First question of a fresh session."""
    session_id = str(uuid.uuid4())
    started_at = time.time()
    await _start(db, session_id)
    await _track(db, session_id, 0, EventType.VIEW)
    return _render_form(request, FormWizard(), session_id, started_at)


@router.post("/", response_class=HTMLResponse)
async def form_step(request: Request, db: DbSession) -> Response:
    """Apply Back/Next/Update to the posted wizard state.

    Update re-renders the current step with the posted answers, so choosing
    "Other" reveals its text input without advancing.
    """
    form = await request.form()
    session_id = str(form.get("session_id") or uuid.uuid4())
    try:
        started_at = float(str(form.get("started_at")))
    except ValueError:
        started_at = time.time()
    if not math.isfinite(started_at):
        started_at = time.time()

    wizard = FormWizard.restore(form.get("step"), form)
    step = wizard.step

    if form.get("action") == "update":
        return _render_form(request, wizard, session_id, started_at)

    if form.get("action") == "back":
        if wizard.back() is Transition.RETREATED:
            await _track(db, session_id, step, EventType.BACK)
            await _track(db, session_id, wizard.step, EventType.VIEW)
        return _render_form(request, wizard, session_id, started_at)

    transition = wizard.next()
    if transition is Transition.BLOCKED:
        return _render_form(request, wizard, session_id, started_at)

    await _track(db, session_id, step, EventType.NEXT)
    if transition is Transition.ADVANCED:
        await _track(db, session_id, wizard.step, EventType.VIEW)
        return _render_form(request, wizard, session_id, started_at)

    await _track(db, session_id, step, EventType.SUBMIT)
    try:
        submission_in = FormSubmissionCreate.model_validate(wizard.payload())
        async with db.begin_nested():
            submission = await submission_service.create_submission(db, submission_in)
    except PydanticValidationError as e:
        logger.info("Wizard submission rejected", session_id=session_id, errors=e.errors())
        return _render_form(
            request,
            wizard,
            session_id,
            started_at,
            notice=e.errors()[0]["msg"],
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except SQLAlchemyError:
        logger.exception("Form submission failed", session_id=session_id)
        return _render_form(
            request,
            wizard,
            session_id,
            started_at,
            notice=SUBMIT_FAILED_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    await _complete(db, session_id, submission.id, started_at)
    return RedirectResponse("/success", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/success", response_class=HTMLResponse)
async def success_page(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "success.html", {})


@router.get("/admin", response_class=HTMLResponse)
async def admin_page(
    request: Request,
    db: DbSession,
    user: CurrentUser,
    q: Annotated[str | None, Query(max_length=255)] = None,
) -> HTMLResponse:
    """Searchable submissions table with export links."""
    submissions = await submission_service.list_submissions(db, search=q)
    return templates.TemplateResponse(
        request,
        "admin.html",
        {"user": user, "submissions": submissions, "q": q or ""},
    )


@router.get("/admin/analytics", response_class=HTMLResponse)
async def analytics_page(
    request: Request,
    db: DbSession,
    user: CurrentUser,
    period: Annotated[TimePeriod, Query()] = TimePeriod.ALL,
) -> HTMLResponse:
    """Metric cards and the drop-off funnel."""
    summary = await analytics_service.get_summary(db, period)
    peak = max((row.viewed for row in summary.drop_off_by_step), default=0)
    context: dict[str, Any] = {
        "user": user,
        "summary": summary,
        "period": period.value,
        "periods": [
            (TimePeriod.SEVEN_DAYS.value, "Last 7 Days"),
            (TimePeriod.THIRTY_DAYS.value, "Last 30 Days"),
            (TimePeriod.ALL.value, "All Time"),
        ],
        "step_titles": [q.title for q in QUESTIONS],
        "step_count": STEP_COUNT,
        "peak": peak,
    }
    return templates.TemplateResponse(request, "analytics.html", context)
