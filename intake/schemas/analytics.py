"""Funnel tracking and aggregate analytics schemas."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import Field

from intake.models.tracking import EventType
from intake.schemas.responses import CamelModel
from intake.wizard import STEP_COUNT


class TimePeriod(StrEnum):
    """Analytics window selectable from the dashboard."""

    SEVEN_DAYS = "7days"
    THIRTY_DAYS = "30days"
    ALL = "all"


class SessionStart(CamelModel):
    """Body of ``POST /api/analytics/session-start``."""

    session_id: str = Field(..., min_length=1, max_length=64)


class SessionComplete(CamelModel):
    """Body of ``PATCH /api/analytics/session-complete``."""

    session_id: str = Field(..., min_length=1, max_length=64)
    submission_id: uuid.UUID
    time_to_complete: int = Field(..., ge=0, description="Seconds from session start")


class FormSessionRead(CamelModel):
    """A tracked form session."""

    id: uuid.UUID
    session_id: str
    started_at: datetime
    completed_at: datetime | None
    submission_id: uuid.UUID | None
    time_to_complete: int | None


class AnalyticsEventCreate(CamelModel):
    """Body of ``POST /api/analytics/event``."""

    session_id: str = Field(..., min_length=1, max_length=64)
    step: int = Field(..., ge=0, le=STEP_COUNT - 1)
    event_type: EventType


class AnalyticsEventRead(CamelModel):
    """A logged wizard action."""

    id: uuid.UUID
    session_id: str
    step: int
    event_type: EventType
    timestamp: datetime


class StepDropOff(CamelModel):
    """Funnel figures for one wizard step."""

    step: int
    viewed: int
    continued: int
    drop_off_rate: float = Field(..., ge=0, le=100)


class AnalyticsSummary(CamelModel):
    """Response of ``GET /api/admin/analytics``."""

    total_sessions: int
    total_submissions: int
    completion_rate: float
    average_time_to_complete: float | None
    drop_off_by_step: list[StepDropOff]
