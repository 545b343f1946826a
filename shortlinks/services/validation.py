from typing import Dict, List
from pydantic import AnyUrl, TypeAdapter, ValidationError as PydanticValidationError

from shortlinks.core.errors import ValidationError
from shortlinks.utils.short_code import (
    SHORT_CODE_CHARSET,
    SHORT_CODE_MAX_LENGTH,
    SHORT_CODE_MIN_LENGTH,
)

URL_MAX_LENGTH = 2048

_absolute_url = TypeAdapter(AnyUrl)


def url_errors(url: str) -> List[str]:
    errors = []
    if len(url) > URL_MAX_LENGTH:
        errors.append(f"URL must be at most {URL_MAX_LENGTH} characters")
    if url != url.strip():
        # The caller's string is stored as-is, so it must already be the clean form
        errors.append("Please enter a valid URL")
        return errors
    try:
        _absolute_url.validate_python(url)
    except PydanticValidationError:
        errors.append("Please enter a valid URL")
    return errors


def short_code_errors(short_code: str) -> List[str]:
    errors = []
    if len(short_code) < SHORT_CODE_MIN_LENGTH:
        errors.append(f"Short code must be at least {SHORT_CODE_MIN_LENGTH} characters")
    if len(short_code) > SHORT_CODE_MAX_LENGTH:
        errors.append(f"Short code must be at most {SHORT_CODE_MAX_LENGTH} characters")
    if not SHORT_CODE_CHARSET.fullmatch(short_code):
        errors.append("Short code can only contain letters, numbers, hyphens, and underscores")
    return errors


def validate_link_input(owner_id: str, url: str, short_code: str) -> None:
    """
    Check every field and raise one ValidationError carrying all messages by field.
    Pure function: never touches storage.
    """
    field_errors: Dict[str, List[str]] = {}

    if not owner_id or not owner_id.strip():
        field_errors["owner_id"] = ["Owner is required"]

    for field, messages in (("url", url_errors(url)), ("short_code", short_code_errors(short_code))):
        if messages:
            field_errors[field] = messages

    if field_errors:
        raise ValidationError(field_errors)
