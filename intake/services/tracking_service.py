"""Tracking service: session lifecycle and the per-step event log."""

import structlog
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.exceptions import ConflictError, NotFoundError
from intake.models import FormAnalyticsEvent, FormSession
from intake.schemas.analytics import AnalyticsEventCreate, SessionComplete
from intake.services.crud import CRUDBase

logger = structlog.get_logger(__name__)


class TrackingService:
    """Record funnel activity. Every call is a single independent write."""

    def __init__(self) -> None:
        self.sessions = CRUDBase(FormSession)
        self.events = CRUDBase(FormAnalyticsEvent)

    async def start_session(self, db: AsyncSession, session_id: str) -> FormSession:
        """Open a session for a visitor entering the form."""
        try:
            async with db.begin_nested():
                session = await self.sessions.create(db, obj_in={"session_id": session_id})
        except IntegrityError as e:
            raise ConflictError(f"Session '{session_id}' already started") from e
        logger.debug("Form session started", session_id=session_id)
        return session

    async def record_event(
        self,
        db: AsyncSession,
        event_in: AnalyticsEventCreate,
    ) -> FormAnalyticsEvent:
        """Append one wizard action. Unknown session ids are accepted."""
        event = await self.events.create(
            db,
            obj_in={
                "session_id": event_in.session_id,
                "step": event_in.step,
                "event_type": event_in.event_type.value,
            },
        )
        logger.debug(
            "Form event recorded",
            session_id=event_in.session_id,
            step=event_in.step,
            event_type=event_in.event_type.value,
        )
        return event

    async def complete_session(
        self,
        db: AsyncSession,
        complete_in: SessionComplete,
    ) -> FormSession:
        """Link a session to its submission. Allowed exactly once per session.

        The ``completed_at IS NULL`` guard lives in the UPDATE itself so two
        racing completions cannot both succeed.
        """
        result = await db.execute(
            update(FormSession)
            .where(
                FormSession.session_id == complete_in.session_id,
                FormSession.completed_at.is_(None),
            )
            .values(
                completed_at=func.now(),
                submission_id=complete_in.submission_id,
                time_to_complete=complete_in.time_to_complete,
            )
            .returning(FormSession)
            .execution_options(synchronize_session=False)
        )
        session = result.scalar_one_or_none()

        if session is None:
            if await self.sessions.get_by(db, session_id=complete_in.session_id):
                raise ConflictError(f"Session '{complete_in.session_id}' is already completed")
            raise NotFoundError("Session", complete_in.session_id)

        logger.info(
            "Form session completed",
            session_id=complete_in.session_id,
            submission_id=str(complete_in.submission_id),
            time_to_complete=complete_in.time_to_complete,
        )
        return session


tracking_service = TrackingService()
