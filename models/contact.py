from enum import Enum
from typing import Any, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError


class ProjectType(str, Enum):
    WEBSITE = "website"
    WEBAPP = "webapp"
    MOBILE = "mobile"
    ECOMMERCE = "ecommerce"
    OTHER = "other"


class BudgetRange(str, Enum):
    LESS_THAN_5K = "less-than-5k"
    FROM_5K_TO_10K = "5k-10k"
    FROM_10K_TO_25K = "10k-25k"
    FROM_25K_TO_50K = "25k-50k"
    MORE_THAN_50K = "more-than-50k"
    NOT_SURE = "not-sure"


PROJECT_TYPE_LABELS = {
    ProjectType.WEBSITE: "Showcase website",
    ProjectType.WEBAPP: "Web application",
    ProjectType.MOBILE: "Mobile application",
    ProjectType.ECOMMERCE: "E-commerce",
    ProjectType.OTHER: "Other",
}

BUDGET_RANGE_LABELS = {
    BudgetRange.LESS_THAN_5K: "Less than 5,000 €",
    BudgetRange.FROM_5K_TO_10K: "5,000 € - 10,000 €",
    BudgetRange.FROM_10K_TO_25K: "10,000 € - 25,000 €",
    BudgetRange.FROM_25K_TO_50K: "25,000 € - 50,000 €",
    BudgetRange.MORE_THAN_50K: "More than 50,000 €",
    BudgetRange.NOT_SURE: "Not sure yet",
}

# Length rules shared by the API model and the client form.
FIELD_RULES: Dict[str, Dict[str, Any]] = {
    "name": {
        "min_length": 2,
        "max_length": 100,
        "too_short": "Name must be at least 2 characters",
        "too_long": "Name must be at most 100 characters",
    },
    "email": {
        "min_length": 0,
        "max_length": 255,
        "too_short": "Please enter a valid email address",
        "too_long": "Email must be at most 255 characters",
        "invalid": "Please enter a valid email address",
    },
    "subject": {
        "min_length": 3,
        "max_length": 200,
        "too_short": "Subject must be at least 3 characters",
        "too_long": "Subject must be at most 200 characters",
    },
    "message": {
        "min_length": 20,
        "max_length": 5000,
        "too_short": "Message must be at least 20 characters",
        "too_long": "Message must be at most 5000 characters",
    },
}


def check_length(field: str, value: str) -> Optional[str]:
    """Return the rule message if ``value`` breaks the length rule for ``field``."""
    rule = FIELD_RULES[field]
    if len(value) < rule["min_length"]:
        return rule["too_short"]
    if len(value) > rule["max_length"]:
        return rule["too_long"]
    return None


def _enforce_length(field: str, value: str) -> str:
    message = check_length(field, value)
    if message:
        error_type = "string_too_short" if len(value) < FIELD_RULES[field]["min_length"] else "string_too_long"
        raise PydanticCustomError(error_type, message)
    return value


class ContactSubmission(BaseModel):
    """Schema for contact form submission."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: EmailStr
    subject: str
    message: str
    project_type: Optional[ProjectType] = Field(default=None, alias="projectType")
    budget: Optional[BudgetRange] = None
    honeypot: str = ""

    @field_validator("name", "subject", "message")
    @classmethod
    def validate_length(cls, v: str, info) -> str:
        return _enforce_length(info.field_name, v)

    @field_validator("email", mode="wrap")
    @classmethod
    def validate_email_field(cls, v, handler):
        if isinstance(v, str):
            if len(v) > FIELD_RULES["email"]["max_length"]:
                raise PydanticCustomError("string_too_long", FIELD_RULES["email"]["too_long"])
            # EmailStr alone accepts "Name <addr>" and keeps only the address
            try:
                validate_email(v, check_deliverability=False)
            except EmailNotValidError:
                raise PydanticCustomError("value_error", FIELD_RULES["email"]["invalid"])
        try:
            return handler(v)
        except ValidationError:
            raise PydanticCustomError("value_error", FIELD_RULES["email"]["invalid"])

    @field_validator("project_type", "budget", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        # HTML selects submit "" when nothing is chosen
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("honeypot", mode="before")
    @classmethod
    def honeypot_none_as_empty(cls, v):
        return "" if v is None else v

    @property
    def is_spam(self) -> bool:
        """A filled honeypot means an automated sender."""
        return len(self.honeypot) > 0


class FieldError(BaseModel):
    field: str
    message: str


class ContactSuccessResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    message_id: Optional[str] = Field(default=None, alias="messageId")


class ContactErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str
    errors: Optional[List[FieldError]] = None


def format_validation_errors(exc: ValidationError) -> List[dict]:
    """Flatten a pydantic ValidationError into [{field, message}] entries."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"]) or "body"
        errors.append({"field": field, "message": error["msg"]})
    return errors
