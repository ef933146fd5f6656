"""Submission exports (CSV and JSON downloads)."""

import csv
import io
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum

import orjson
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from intake.config import get_settings
from intake.models import FormSubmission
from intake.schemas.submission import FormSubmissionRead
from intake.services.submission_service import submission_service

logger = structlog.get_logger(__name__)

CSV_HEADER = (
    "ID",
    "Name",
    "Email",
    "Referral Source",
    "Referral Source (Other)",
    "Additional Info",
    "Submitted At",
)


class ExportFormat(StrEnum):
    CSV = "csv"
    JSON = "json"


MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv; charset=utf-8",
    ExportFormat.JSON: "application/json",
}


@dataclass(frozen=True)
class ExportFile:
    """A rendered download."""

    content: bytes
    media_type: str
    filename: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Disposition": f'attachment; filename="{self.filename}"'}


def format_timestamp(value: datetime) -> str:
    """Render as ``Mon D, YYYY h:mm AM/PM`` in UTC, e.g. ``Oct 8, 2026 3:05 PM``."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value:%b} {value.day}, {value.year} {hour}:{value:%M} {meridiem}"


def render_csv(submissions: Sequence[FormSubmission]) -> str:
    """RFC 4180 CSV: minimal quoting, doubled quotes, CRLF between rows."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(CSV_HEADER)
    for submission in submissions:
        writer.writerow(
            (
                str(submission.id),
                submission.name,
                submission.email,
                submission.referral_source or "",
                submission.referral_source_other or "",
                submission.additional_info,
                format_timestamp(submission.submitted_at),
            )
        )
    # Rows are joined, not terminated
    return buffer.getvalue().removesuffix("\r\n")


def render_json(submissions: Sequence[FormSubmission]) -> bytes:
    """Pretty-printed array of full records in API field names."""
    records = [
        FormSubmissionRead.model_validate(s).model_dump(mode="json", by_alias=True)
        for s in submissions
    ]
    return orjson.dumps(records, option=orjson.OPT_INDENT_2)


def export_filename(export_format: ExportFormat, today: date | None = None) -> str:
    prefix = get_settings().export_filename_prefix
    today = today or datetime.now(UTC).date()
    return f"{prefix}-{today.isoformat()}.{export_format.value}"


class ExportService:
    """Render the full submission set as a download."""

    async def export(self, db: AsyncSession, export_format: ExportFormat) -> ExportFile:
        submissions = await submission_service.list_submissions(db)

        if export_format is ExportFormat.CSV:
            content = render_csv(submissions).encode("utf-8")
        else:
            content = render_json(submissions)

        export = ExportFile(
            content=content,
            media_type=MEDIA_TYPES[export_format],
            filename=export_filename(export_format),
        )
        logger.info(
            "Submissions exported",
            format=export_format.value,
            count=len(submissions),
            bytes=len(content),
        )
        return export


export_service = ExportService()
