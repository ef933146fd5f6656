"""Submission service: store and list intake form submissions."""

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from intake.models import FormSubmission
from intake.schemas.submission import FormSubmissionCreate
from intake.services.crud import CRUDBase

logger = structlog.get_logger(__name__)


class SubmissionService(CRUDBase[FormSubmission]):
    """Service for form submissions."""

    def __init__(self) -> None:
        super().__init__(FormSubmission)

    async def create_submission(
        self,
        db: AsyncSession,
        submission_in: FormSubmissionCreate,
    ) -> FormSubmission:
        """Persist a validated submission."""
        submission = await self.create(
            db,
            obj_in={
                "name": submission_in.name,
                "email": submission_in.email,
                "referral_source": (
                    submission_in.referral_source.value if submission_in.referral_source else None
                ),
                "referral_source_other": submission_in.referral_source_other,
                "additional_info": submission_in.additional_info,
            },
        )
        logger.info(
            "Form submission created",
            submission_id=str(submission.id),
            referral_source=submission.referral_source,
        )
        return submission

    async def list_submissions(
        self,
        db: AsyncSession,
        *,
        search: str | None = None,
    ) -> list[FormSubmission]:
        """All submissions, newest first, optionally filtered by name or email.

        The search term is matched literally: ``%`` and ``_`` are escaped.
        """
        query = select(FormSubmission)
        if search and search.strip():
            term = search.strip()
            query = query.where(
                or_(
                    FormSubmission.name.icontains(term, autoescape=True),
                    FormSubmission.email.icontains(term, autoescape=True),
                )
            )
        query = query.order_by(FormSubmission.submitted_at.desc(), FormSubmission.id)
        result = await db.execute(query)
        return list(result.scalars().all())


submission_service = SubmissionService()
