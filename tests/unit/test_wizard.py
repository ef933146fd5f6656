"""Tests for the intake form wizard."""

import pytest

from intake.wizard import (
    EMAIL_MESSAGE,
    FIELDS,
    QUESTIONS,
    STEP_COUNT,
    FormWizard,
    Transition,
    shows_other_field,
    validate_field,
)


def filled_wizard(step: int = 0) -> FormWizard:
    wizard = FormWizard(step=step)
    wizard.data.update(
        name="Jane Doe",
        email="jane@example.com",
        referralSource="Google",
        additionalInfo="Need a quote",
    )
    return wizard


class TestQuestions:
    """Tests for the question list."""

    def test_four_questions_in_order(self) -> None:
        assert [q.id for q in QUESTIONS] == [
            "name",
            "email",
            "referralSource",
            "additionalInfo",
        ]
        assert STEP_COUNT == 4

    def test_referral_options(self) -> None:
        assert QUESTIONS[2].options == ("Google", "Friend", "Social Media", "Other")
        assert QUESTIONS[2].required is False

    def test_required_message_drops_question_mark(self) -> None:
        assert QUESTIONS[0].required_message == "What's your name is required"

    def test_fields_include_other_companion(self) -> None:
        assert FIELDS[-1] == "referralSourceOther"


class TestValidateField:
    """Tests for per-field validation."""

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_name_is_required(self, value: str | None) -> None:
        assert validate_field("name", value) == "What's your name is required"

    def test_name_ok(self) -> None:
        assert validate_field("name", "Jane") is None

    @pytest.mark.parametrize("value", ["not-an-email", "a@b", "a b@c.d", "@example.com"])
    def test_bad_email(self, value: str) -> None:
        assert validate_field("email", value) == EMAIL_MESSAGE

    def test_email_is_trimmed(self) -> None:
        assert validate_field("email", "  jane@example.com ") is None

    def test_optional_referral_never_errors(self) -> None:
        assert validate_field("referralSource", "") is None

    def test_unknown_field_is_ignored(self) -> None:
        assert validate_field("favouriteColour", "") is None


def test_other_field_only_for_other() -> None:
    assert shows_other_field("Other") is True
    assert shows_other_field("Google") is False
    assert shows_other_field(None) is False


class TestTransitions:
    """Tests for Next/Back navigation."""

    def test_next_blocked_on_empty_required_field(self) -> None:
        wizard = FormWizard()

        assert wizard.next() is Transition.BLOCKED
        assert wizard.step == 0
        assert wizard.current_error == "What's your name is required"

    def test_next_advances_when_valid(self) -> None:
        wizard = filled_wizard()

        assert wizard.next() is Transition.ADVANCED
        assert wizard.step == 1
        assert wizard.errors == {}

    def test_next_on_last_step_requests_submit(self) -> None:
        wizard = filled_wizard(step=STEP_COUNT - 1)

        assert wizard.next() is Transition.SUBMIT
        assert wizard.step == STEP_COUNT - 1

    def test_back_from_first_step_stays(self) -> None:
        wizard = FormWizard()

        assert wizard.back() is Transition.STAYED
        assert wizard.step == 0

    def test_back_does_not_validate(self) -> None:
        wizard = FormWizard(step=1)

        assert wizard.back() is Transition.RETREATED
        assert wizard.step == 0
        assert wizard.errors == {}

    def test_optional_step_advances_when_blank(self) -> None:
        wizard = filled_wizard(step=2)
        wizard.data["referralSource"] = ""

        assert wizard.next() is Transition.ADVANCED

    def test_invalid_step_rejected(self) -> None:
        with pytest.raises(ValueError):
            FormWizard(step=STEP_COUNT)


class TestTouchedValidation:
    """Errors appear after blur and clear as the value is fixed."""

    def test_update_before_blur_does_not_validate(self) -> None:
        wizard = FormWizard()
        wizard.update("name", "")

        assert wizard.current_error is None

    def test_update_after_blur_revalidates(self) -> None:
        wizard = FormWizard()
        assert wizard.blur() is not None

        wizard.update("name", "Jane")

        assert wizard.current_error is None

    def test_update_unknown_field(self) -> None:
        with pytest.raises(KeyError):
            FormWizard().update("phone", "123")


class TestRestore:
    """Tests for rebuilding posted wizard state."""

    def test_restore_reads_fields(self) -> None:
        wizard = FormWizard.restore("2", {"name": "Jane", "email": "jane@example.com"})

        assert wizard.step == 2
        assert wizard.data["name"] == "Jane"
        assert wizard.data["additionalInfo"] == ""

    @pytest.mark.parametrize("step", [None, "abc", "-3"])
    def test_bad_step_clamps_to_start(self, step: object) -> None:
        assert FormWizard.restore(step, {}).step == 0

    def test_large_step_clamps_to_end(self) -> None:
        assert FormWizard.restore("99", {}).step == STEP_COUNT - 1


class TestPayload:
    """Tests for the submission payload."""

    def test_payload_uses_api_names(self) -> None:
        payload = filled_wizard().payload()

        assert payload == {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "referralSource": "Google",
            "referralSourceOther": None,
            "additionalInfo": "Need a quote",
        }

    def test_other_text_kept_for_other(self) -> None:
        wizard = filled_wizard()
        wizard.data.update(referralSource="Other", referralSourceOther=" Podcast ")

        assert wizard.payload()["referralSourceOther"] == "Podcast"

    def test_other_text_dropped_otherwise(self) -> None:
        wizard = filled_wizard()
        wizard.data["referralSourceOther"] = "Podcast"

        assert wizard.payload()["referralSourceOther"] is None

    def test_blank_referral_is_none(self) -> None:
        wizard = filled_wizard()
        wizard.data["referralSource"] = ""

        assert wizard.payload()["referralSource"] is None

    def test_show_other_field_only_on_referral_step(self) -> None:
        wizard = filled_wizard(step=2)
        wizard.data["referralSource"] = "Other"
        assert wizard.show_other_field is True

        wizard.step = 3
        assert wizard.show_other_field is False
