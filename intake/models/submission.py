"""Form submission model."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from intake.database import Base


class ReferralSource(StrEnum):
    """How the visitor heard about us."""

    GOOGLE = "Google"
    FRIEND = "Friend"
    SOCIAL_MEDIA = "Social Media"
    OTHER = "Other"


class FormSubmission(Base):
    """A completed intake form. Rows are never updated after insert."""

    __tablename__ = "form_submissions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)

    referral_source: Mapped[str | None] = mapped_column(String(50), nullable=True)
    referral_source_other: Mapped[str | None] = mapped_column(Text, nullable=True)

    additional_info: Mapped[str] = mapped_column(Text, nullable=False)

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
