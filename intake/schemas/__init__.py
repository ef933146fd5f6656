"""Pydantic schemas package."""

from intake.schemas.analytics import (
    AnalyticsEventCreate,
    AnalyticsEventRead,
    AnalyticsSummary,
    FormSessionRead,
    SessionComplete,
    SessionStart,
    StepDropOff,
    TimePeriod,
)
from intake.schemas.responses import CamelModel, ErrorDetail, ErrorResponse, FieldError
from intake.schemas.submission import FormSubmissionCreate, FormSubmissionRead
from intake.schemas.user import UserRead

__all__ = [
    "CamelModel",
    "ErrorDetail",
    "ErrorResponse",
    "FieldError",
    "FormSubmissionCreate",
    "FormSubmissionRead",
    "SessionStart",
    "SessionComplete",
    "FormSessionRead",
    "AnalyticsEventCreate",
    "AnalyticsEventRead",
    "StepDropOff",
    "AnalyticsSummary",
    "TimePeriod",
    "UserRead",
]
