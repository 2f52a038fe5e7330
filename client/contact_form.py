"""
Client-side contact form state.

Mirrors the server schema for immediate per-field feedback (on blur) and
drives a single in-flight submission through ContactApiClient. The server
stays authoritative: its field errors are merged back into ``errors``.
"""
from typing import Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import ValidationError

from client.api_client import ContactApiClient, ContactApiError
from models.contact import (
    FIELD_RULES,
    BudgetRange,
    ContactSubmission,
    ProjectType,
    check_length,
    format_validation_errors,
)
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_VALUES = {
    "name": "",
    "email": "",
    "subject": "",
    "message": "",
    "projectType": None,
    "budget": None,
    "honeypot": "",
}

_CHOICES = {
    "projectType": {item.value for item in ProjectType},
    "budget": {item.value for item in BudgetRange},
}


def validate_field(field: str, value) -> Optional[str]:
    """Client-side check for one field. Returns an error message or None."""
    if field in FIELD_RULES:
        if not isinstance(value, str):
            return FIELD_RULES[field]["too_short"]
        message = check_length(field, value)
        if message:
            return message
        if field == "email":
            try:
                validate_email(value, check_deliverability=False)
            except EmailNotValidError:
                return FIELD_RULES["email"]["invalid"]
        return None

    if field in _CHOICES:
        if value in (None, "") or value in _CHOICES[field]:
            return None
        return "Please choose one of the listed options"

    return None


class ContactForm:
    def __init__(self, api_client: ContactApiClient):
        self.api_client = api_client
        self.values = dict(DEFAULT_VALUES)
        self.errors: Dict[str, str] = {}
        self.is_submitting = False
        self.last_error: Optional[str] = None
        self.last_message: Optional[str] = None

    @property
    def can_submit(self) -> bool:
        return not self.is_submitting

    def set_value(self, field: str, value) -> None:
        if field not in DEFAULT_VALUES:
            raise KeyError(f"Unknown contact form field: {field}")
        self.values[field] = value

    def blur(self, field: str) -> Optional[str]:
        """Validate one field when it loses focus; records and returns its error."""
        message = validate_field(field, self.values.get(field))
        if message:
            self.errors[field] = message
        else:
            self.errors.pop(field, None)
        return message

    def payload(self) -> dict:
        return {key: value for key, value in self.values.items() if value is not None}

    def validate(self) -> bool:
        """Full check against the shared schema, keeping the first error per field."""
        try:
            ContactSubmission.model_validate(self.payload())
        except ValidationError as e:
            self.errors = {}
            for error in format_validation_errors(e):
                self.errors.setdefault(error["field"], error["message"])
            return False
        self.errors = {}
        return True

    def reset(self) -> None:
        self.values = dict(DEFAULT_VALUES)
        self.errors = {}

    async def submit(self) -> bool:
        """
        Send the form once. Returns True when the server accepted it.

        Ignored while another submission is in flight. On success the fields
        are reset; on failure they are kept so the user can correct them.
        """
        if not self.can_submit:
            logger.debug("Submission already in progress; ignoring")
            return False

        self.last_error = None
        self.last_message = None
        if not self.validate():
            return False

        self.is_submitting = True
        try:
            result = await self.api_client.send_contact_message(self.payload())
        except ContactApiError as e:
            self.last_error = e.message
            for error in e.errors:
                self.errors[error.get("field", "")] = error.get("message", "")
            return False
        finally:
            self.is_submitting = False

        self.reset()
        self.last_message = result.get("message")
        return True
