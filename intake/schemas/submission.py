"""Form submission schemas."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError

from intake.models.submission import ReferralSource
from intake.schemas.responses import CamelModel
from intake.wizard import shows_other_field, validate_field


def _check(field_id: str, value: str) -> str:
    error = validate_field(field_id, value)
    if error:
        raise PydanticCustomError(f"{field_id}_invalid", error)
    return value


class FormSubmissionCreate(CamelModel):
    """Body of ``POST /api/form-submissions``."""

    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    referral_source: ReferralSource | None = None
    referral_source_other: str | None = Field(None, max_length=500)
    additional_info: str = Field(..., max_length=10000)

    @field_validator("name", "email", "additional_info", mode="after")
    @classmethod
    def apply_wizard_rules(cls, v: str, info: ValidationInfo) -> str:
        """Re-run the wizard's field rules on the server."""
        v = v.strip()
        return _check(to_wizard_field(info.field_name or ""), v)

    @field_validator("referral_source", "referral_source_other", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def drop_unused_other(self) -> "FormSubmissionCreate":
        """Only keep the free-text referral when "Other" was picked."""
        if not shows_other_field(self.referral_source):
            self.referral_source_other = None
        elif self.referral_source_other is not None:
            self.referral_source_other = self.referral_source_other.strip()
        return self


def to_wizard_field(field_name: str) -> str:
    """Map a snake_case attribute to the wizard's question id."""
    head, *rest = field_name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class FormSubmissionRead(CamelModel):
    """A stored submission."""

    id: uuid.UUID
    name: str
    email: str
    referral_source: str | None
    referral_source_other: str | None
    additional_info: str
    submitted_at: datetime
