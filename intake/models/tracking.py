"""Funnel tracking models: one session per visitor attempt plus its event log."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from intake.database import Base


class EventType(StrEnum):
    """Actions recorded while a visitor moves through the wizard."""

    VIEW = "view"
    NEXT = "next"
    BACK = "back"
    SUBMIT = "submit"


class FormSession(Base):
    """A visitor's attempt at the form, from first view to completion or abandonment."""

    __tablename__ = "form_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Client-generated token
    session_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    # Set together, exactly once
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    submission_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    time_to_complete: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class FormAnalyticsEvent(Base):
    """Append-only log of wizard actions.

    ``session_id`` carries no foreign key: events for an unknown session are
    stored, not rejected.
    """

    __tablename__ = "form_analytics_events"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    session_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    step: Mapped[int] = mapped_column(Integer, nullable=False)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
