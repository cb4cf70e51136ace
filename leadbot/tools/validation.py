"""Validation of lead details supplied by the assistant."""

import re
from dataclasses import dataclass, field

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_PATTERN = re.compile(r"\+?[\d\s()-]{8,}")

NAME_ERROR = "Name must be at least 2 characters long"
EMAIL_ERROR = "Please provide a valid email address"
PHONE_ERROR = "Please provide a valid phone number"


@dataclass
class ValidationResult:
    """Outcome of validating one set of lead arguments."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_phone_number(phone_number: str) -> bool:
    return PHONE_PATTERN.fullmatch(phone_number) is not None


def validate_lead_arguments(arguments: dict) -> ValidationResult:
    """Check name, email and phone_number; collects every failure."""
    result = ValidationResult()

    if len(_text(arguments.get("name")).strip()) < 2:
        result.errors.append(NAME_ERROR)

    if not is_valid_email(_text(arguments.get("email"))):
        result.errors.append(EMAIL_ERROR)

    if not is_valid_phone_number(_text(arguments.get("phone_number"))):
        result.errors.append(PHONE_ERROR)

    return result
