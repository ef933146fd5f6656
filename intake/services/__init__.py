"""Business logic services package."""

from intake.services.analytics_service import AnalyticsService, analytics_service
from intake.services.crud import CRUDBase
from intake.services.export_service import ExportFormat, ExportService, export_service
from intake.services.submission_service import SubmissionService, submission_service
from intake.services.tracking_service import TrackingService, tracking_service

__all__ = [
    "CRUDBase",
    "AnalyticsService",
    "analytics_service",
    "ExportFormat",
    "ExportService",
    "export_service",
    "SubmissionService",
    "submission_service",
    "TrackingService",
    "tracking_service",
]
