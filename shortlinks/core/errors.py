from typing import Dict, List, Optional


class RegistryError(Exception):
    """Base class for every outcome the link registry reports to its callers."""

    message = "Link registry error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(RegistryError):
    """Malformed input. ``field_errors`` maps a field name to its messages, in order."""

    message = "Invalid input"

    def __init__(self, field_errors: Dict[str, List[str]]):
        super().__init__()
        self.field_errors = field_errors


class ConflictError(RegistryError):
    message = "This short code is already taken. Please choose another one."


class NotFoundError(RegistryError):
    # Same message for "missing" and "owned by someone else"
    message = "Link not found"


class StorageError(RegistryError):
    message = "Something went wrong. Please try again."
