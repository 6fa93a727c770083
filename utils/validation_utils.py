"""
utils/validation_utils.py

Purpose: Input validation

- Email shape check
- Absolute URL check for avatar images
- Field normalization (trim / lowercase)
- normalize_and_validate: single gate in front of create and update
"""

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError as PydanticValidationError

from app.core.exceptions import (
    UserDeskError,
    MissingFieldError,
    InvalidEmailFormatError,
    InvalidImageUrlError,
)
from app.models.user import UserFields

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
REQUIRED_FIELDS = ("name", "email")

_url_adapter = TypeAdapter(AnyUrl)


def clean_text(value: Any) -> str:
    """
    Trims a raw form/JSON value. None becomes an empty string.

    Args:
        value: Raw field value

    Returns:
        Trimmed string
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    return value.strip()


def normalize_email(email: Any) -> str:
    """Trim and lowercase an email for storage or comparison."""
    return clean_text(email).lower()


def validate_email_format(email: str) -> bool:
    """
    Checks the local@domain.tld shape.

    Each of the three parts needs at least one character that is neither
    whitespace nor '@'.
    """
    if not email:
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_image_url(url: str) -> bool:
    """
    Validates that a string parses as an absolute URL.

    Args:
        url: Trimmed URL string (non-empty)

    Returns:
        True if the URL has a scheme and a valid remainder
    """
    if not url:
        return False
    try:
        _url_adapter.validate_python(url)
    except PydanticValidationError:
        return False
    return True


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of normalize_and_validate.

    Exactly one of `fields` and `error` is set.
    """

    fields: Optional[UserFields] = None
    error: Optional[UserDeskError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_and_validate(payload: Mapping[str, Any], is_update: bool = False) -> ValidationResult:
    """
    Normalizes and checks a submitted user payload.

    Create and update share the same rules: name and email are required,
    image is optional. No side effects; failures are returned, not raised.

    Args:
        payload: Raw mapping with optional name, email, image
        is_update: True when validating an update request

    Returns:
        ValidationResult with normalized UserFields or the first error found
    """
    name = clean_text(payload.get("name"))
    email = clean_text(payload.get("email"))
    image = clean_text(payload.get("image"))

    values = {"name": name, "email": email}
    missing: List[str] = [field for field in REQUIRED_FIELDS if not values[field]]
    if missing:
        return ValidationResult(error=MissingFieldError(missing))

    if not validate_email_format(email):
        return ValidationResult(
            error=InvalidEmailFormatError(details={"email": email})
        )

    if image and not validate_image_url(image):
        return ValidationResult(
            error=InvalidImageUrlError(details={"image": image})
        )

    return ValidationResult(
        fields=UserFields(name=name, email=email.lower(), image=image)
    )
