"""User schemas."""

from datetime import datetime

from intake.schemas.responses import CamelModel


class UserRead(CamelModel):
    """The signed-in dashboard user."""

    id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    created_at: datetime
    updated_at: datetime
