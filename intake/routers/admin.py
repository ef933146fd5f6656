"""Admin analytics and export endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, Response

from intake.auth import CurrentUser
from intake.database import DbSession
from intake.schemas.analytics import AnalyticsSummary, TimePeriod
from intake.services import ExportFormat, analytics_service, export_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/analytics",
    response_model=AnalyticsSummary,
    summary="Funnel analytics",
)
async def get_analytics(
    db: DbSession,
    _user: CurrentUser,
    time_period: Annotated[TimePeriod, Query(alias="timePeriod")] = TimePeriod.ALL,
) -> AnalyticsSummary:
    """
    Session totals, completion rate, average completion time and
    per-step drop-off, optionally limited to the last 7 or 30 days.
    """
    return await analytics_service.get_summary(db, time_period)


@router.get(
    "/export/{export_format}",
    response_class=Response,
    summary="Download all submissions",
)
async def export_submissions(
    export_format: ExportFormat,
    db: DbSession,
    _user: CurrentUser,
) -> Response:
    """All submissions as a CSV or JSON attachment, newest first."""
    export = await export_service.export(db, export_format)
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers=export.headers,
    )
