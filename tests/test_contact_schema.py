import pytest
from pydantic import ValidationError

from models.contact import (
    BudgetRange,
    ContactSubmission,
    ProjectType,
    format_validation_errors,
)


def _errors(payload: dict) -> list:
    with pytest.raises(ValidationError) as exc_info:
        ContactSubmission.model_validate(payload)
    return format_validation_errors(exc_info.value)


def test_valid_submission_without_optional_fields(valid_payload):
    submission = ContactSubmission.model_validate(valid_payload)
    assert submission.name == "Jo"
    assert submission.project_type is None
    assert submission.budget is None
    assert submission.is_spam is False


def test_optional_enums_parse_from_json_keys(valid_payload):
    valid_payload.update({"projectType": "webapp", "budget": "10k-25k"})
    submission = ContactSubmission.model_validate(valid_payload)
    assert submission.project_type is ProjectType.WEBAPP
    assert submission.budget is BudgetRange.FROM_10K_TO_25K


def test_blank_optional_enums_are_absent(valid_payload):
    valid_payload.update({"projectType": "", "budget": "  "})
    submission = ContactSubmission.model_validate(valid_payload)
    assert submission.project_type is None
    assert submission.budget is None


def test_missing_honeypot_defaults_to_empty(valid_payload):
    del valid_payload["honeypot"]
    assert ContactSubmission.model_validate(valid_payload).honeypot == ""
    valid_payload["honeypot"] = None
    assert ContactSubmission.model_validate(valid_payload).honeypot == ""


def test_filled_honeypot_is_valid_but_spam(valid_payload):
    valid_payload["honeypot"] = "http://spam.example"
    submission = ContactSubmission.model_validate(valid_payload)
    assert submission.is_spam is True


@pytest.mark.parametrize(
    "field,value,expected",
    [
        ("name", "J", "Name must be at least 2 characters"),
        ("name", "J" * 101, "Name must be at most 100 characters"),
        ("email", "not-an-email", "Please enter a valid email address"),
        ("email", "Jo Bot <jo@example.com>", "Please enter a valid email address"),
        ("email", "a" * 250 + "@b.com", "Email must be at most 255 characters"),
        ("subject", "Hi", "Subject must be at least 3 characters"),
        ("subject", "s" * 201, "Subject must be at most 200 characters"),
        ("message", "x" * 5, "Message must be at least 20 characters"),
        ("message", "x" * 5001, "Message must be at most 5000 characters"),
    ],
)
def test_single_violation_yields_single_error(valid_payload, field, value, expected):
    valid_payload[field] = value
    assert _errors(valid_payload) == [{"field": field, "message": expected}]


@pytest.mark.parametrize("field", ["projectType", "budget"])
def test_unknown_enum_value_names_json_field(valid_payload, field):
    valid_payload[field] = "spaceship"
    errors = _errors(valid_payload)
    assert len(errors) == 1
    assert errors[0]["field"] == field


def test_boundaries_are_accepted(valid_payload):
    valid_payload.update({
        "name": "n" * 100,
        "subject": "abc",
        "message": "m" * 5000,
    })
    ContactSubmission.model_validate(valid_payload)


def test_missing_required_fields_each_reported():
    errors = _errors({"honeypot": ""})
    assert sorted(error["field"] for error in errors) == ["email", "message", "name", "subject"]


def test_non_object_body_is_reported_on_body():
    errors = _errors(["not", "an", "object"])
    assert errors[0]["field"] == "body"
