"""SQLAlchemy models package."""

from intake.models.submission import FormSubmission, ReferralSource
from intake.models.tracking import EventType, FormAnalyticsEvent, FormSession
from intake.models.user import User

__all__ = [
    # Submissions
    "FormSubmission",
    "ReferralSource",
    # Tracking
    "FormSession",
    "FormAnalyticsEvent",
    "EventType",
    # Users
    "User",
]
