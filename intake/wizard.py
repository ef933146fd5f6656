"""Multi-step intake form: questions, field validation and step transitions.

The wizard is a linear state machine with one state per question. ``next``
validates the current field before moving on and asks for submission from
the final step; ``back`` moves one step towards the start. The same field
rules back the submission API so that the browser flow and direct API
clients are held to identical constraints.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from intake.models.submission import ReferralSource

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_MESSAGE = "Please enter a valid email address"

QuestionType = Literal["text", "email", "select", "textarea"]


@dataclass(frozen=True)
class Question:
    """One wizard step."""

    id: str
    title: str
    label: str
    placeholder: str
    type: QuestionType
    helper: str
    options: tuple[str, ...] = ()
    required: bool = True

    @property
    def required_message(self) -> str:
        return f"{self.label.replace('?', '')} is required"


QUESTIONS: tuple[Question, ...] = (
    Question(
        id="name",
        title="Name",
        label="What's your name?",
        placeholder="Enter your full name",
        type="text",
        helper="We'd love to know who we're talking to",
    ),
    Question(
        id="email",
        title="Email",
        label="What's your email address?",
        placeholder="your@email.com",
        type="email",
        helper="We'll use this to get in touch with you",
    ),
    Question(
        id="referralSource",
        title="Referral Source",
        label="How did you hear about us?",
        placeholder="Select an option",
        type="select",
        helper="This helps us understand how people find us",
        options=tuple(source.value for source in ReferralSource),
        required=False,
    ),
    Question(
        id="additionalInfo",
        title="Additional Info",
        label="Tell us more about your request",
        placeholder="Share any details that would help us understand your needs...",
        type="textarea",
        helper="Feel free to be as detailed as you'd like",
    ),
)

STEP_COUNT = len(QUESTIONS)

# Free-text companion of the referral select
OTHER_FIELD = "referralSourceOther"
FIELDS: tuple[str, ...] = tuple(q.id for q in QUESTIONS) + (OTHER_FIELD,)

_QUESTIONS_BY_ID = {q.id: q for q in QUESTIONS}


def validate_field(field_id: str, value: str | None) -> str | None:
    """Return the inline error message for a field value, or None if valid."""
    question = _QUESTIONS_BY_ID.get(field_id)
    if question is None or not question.required:
        return None

    value = (value or "").strip()
    if not value:
        return question.required_message
    if question.type == "email" and not EMAIL_PATTERN.match(value):
        return EMAIL_MESSAGE
    return None


def shows_other_field(referral_source: str | None) -> bool:
    """The "specify other" input is only offered for the Other option."""
    return referral_source == ReferralSource.OTHER.value


class Transition(StrEnum):
    """Outcome of a navigation request."""

    ADVANCED = "advanced"
    RETREATED = "retreated"
    BLOCKED = "blocked"
    SUBMIT = "submit"
    STAYED = "stayed"


@dataclass
class FormWizard:
    """Wizard state for one visitor."""

    step: int = 0
    data: dict[str, str] = field(default_factory=lambda: dict.fromkeys(FIELDS, ""))
    errors: dict[str, str] = field(default_factory=dict)
    touched: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        if not 0 <= self.step < STEP_COUNT:
            raise ValueError(f"step must be between 0 and {STEP_COUNT - 1}, got {self.step}")
        for name in FIELDS:
            self.data.setdefault(name, "")

    @classmethod
    def restore(cls, step: object, values: Mapping[str, object]) -> FormWizard:
        """Rebuild the state posted back by the form page.

        A missing or malformed step restarts at the first question.
        """
        try:
            index = int(str(step))
        except ValueError:
            index = 0
        index = min(max(index, 0), STEP_COUNT - 1)
        data = {name: str(values.get(name) or "") for name in FIELDS}
        return cls(step=index, data=data)

    @property
    def question(self) -> Question:
        return QUESTIONS[self.step]

    @property
    def current_value(self) -> str:
        return self.data.get(self.question.id, "")

    @property
    def current_error(self) -> str | None:
        return self.errors.get(self.question.id)

    @property
    def is_first(self) -> bool:
        return self.step == 0

    @property
    def is_last(self) -> bool:
        return self.step == STEP_COUNT - 1

    @property
    def show_other_field(self) -> bool:
        return self.question.id == "referralSource" and shows_other_field(
            self.data.get("referralSource")
        )

    def _check(self, field_id: str) -> str | None:
        error = validate_field(field_id, self.data.get(field_id))
        if error:
            self.errors[field_id] = error
        else:
            self.errors.pop(field_id, None)
        return error

    def update(self, field_id: str, value: str) -> None:
        """Change a field; a field that was already touched is re-validated."""
        if field_id not in FIELDS:
            raise KeyError(field_id)
        self.data[field_id] = value
        if field_id in self.touched:
            self._check(field_id)

    def blur(self) -> str | None:
        """Leave the current field: mark it touched and validate it."""
        self.touched.add(self.question.id)
        return self._check(self.question.id)

    def next(self) -> Transition:
        """Validate the current field and advance, or request submission on the last step."""
        if self.blur():
            return Transition.BLOCKED
        if self.is_last:
            return Transition.SUBMIT
        self.step += 1
        return Transition.ADVANCED

    def back(self) -> Transition:
        if self.is_first:
            return Transition.STAYED
        self.step -= 1
        return Transition.RETREATED

    def payload(self) -> dict[str, str | None]:
        """Submission body in API field names."""
        referral = self.data.get("referralSource") or None
        other = self.data.get(OTHER_FIELD, "").strip() if shows_other_field(referral) else ""
        return {
            "name": self.data["name"].strip(),
            "email": self.data["email"].strip(),
            "referralSource": referral,
            "referralSourceOther": other or None,
            "additionalInfo": self.data["additionalInfo"].strip(),
        }
