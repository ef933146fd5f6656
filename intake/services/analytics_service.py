"""Funnel analytics over tracked form sessions.

Totals come from ``form_sessions``; per-step views come from the ``view``
rows of ``form_analytics_events``. A step's "continued" count is the number
of sessions that viewed the following step, and for the final step the
number of completed sessions. The arithmetic lives in plain functions so it
can be exercised without a database.
"""

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta

import structlog
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from intake.config import TIME_PERIOD_DAYS
from intake.models import EventType, FormAnalyticsEvent, FormSession
from intake.schemas.analytics import AnalyticsSummary, StepDropOff, TimePeriod
from intake.wizard import STEP_COUNT

logger = structlog.get_logger(__name__)


def resolve_since(time_period: TimePeriod, now: datetime | None = None) -> datetime | None:
    """Lower bound for the window, or None for all time."""
    days = TIME_PERIOD_DAYS.get(time_period.value)
    if days is None:
        return None
    return (now or datetime.now(UTC)) - timedelta(days=days)


def completion_rate(total_sessions: int, total_submissions: int) -> float:
    """Percentage of sessions that finished; 0 when there are no sessions."""
    if total_sessions == 0:
        return 0.0
    return total_submissions / total_sessions * 100


def drop_off_rate(viewed: int, continued: int) -> float:
    """Percentage of viewers that did not continue, clamped to [0, 100]."""
    if viewed == 0:
        return 0.0
    rate = (viewed - continued) / viewed * 100
    return min(100.0, max(0.0, rate))


def build_drop_off(
    viewed_by_step: Mapping[int, int],
    total_submissions: int,
    step_count: int = STEP_COUNT,
) -> list[StepDropOff]:
    """Funnel rows for steps ``0..step_count-1``."""
    steps = []
    for step in range(step_count):
        viewed = viewed_by_step.get(step, 0)
        if step < step_count - 1:
            continued = viewed_by_step.get(step + 1, 0)
        else:
            continued = total_submissions
        steps.append(
            StepDropOff(
                step=step,
                viewed=viewed,
                continued=continued,
                drop_off_rate=drop_off_rate(viewed, continued),
            )
        )
    return steps


class AnalyticsService:
    """Read-only aggregation; safe to call concurrently with tracking writes."""

    async def get_summary(
        self,
        db: AsyncSession,
        time_period: TimePeriod = TimePeriod.ALL,
        *,
        now: datetime | None = None,
    ) -> AnalyticsSummary:
        since = resolve_since(time_period, now)

        session_query = select(
            func.count(FormSession.id),
            func.count(FormSession.completed_at),
            func.avg(FormSession.time_to_complete),
        )
        if since is not None:
            session_query = session_query.where(FormSession.started_at >= since)
        total_sessions, total_submissions, avg_time = (await db.execute(session_query)).one()

        views_query = (
            select(
                FormAnalyticsEvent.step,
                func.count(distinct(FormAnalyticsEvent.session_id)),
            )
            .where(FormAnalyticsEvent.event_type == EventType.VIEW.value)
            .group_by(FormAnalyticsEvent.step)
        )
        if since is not None:
            views_query = views_query.where(FormAnalyticsEvent.timestamp >= since)
        viewed_by_step = {step: count for step, count in (await db.execute(views_query)).all()}

        summary = AnalyticsSummary(
            total_sessions=total_sessions,
            total_submissions=total_submissions,
            completion_rate=completion_rate(total_sessions, total_submissions),
            average_time_to_complete=float(avg_time) if avg_time is not None else None,
            drop_off_by_step=build_drop_off(viewed_by_step, total_submissions),
        )
        logger.debug(
            "Analytics computed",
            time_period=time_period.value,
            total_sessions=total_sessions,
            total_submissions=total_submissions,
        )
        return summary


analytics_service = AnalyticsService()
