import re

SHORT_CODE_MIN_LENGTH = 3
SHORT_CODE_MAX_LENGTH = 20

SHORT_CODE_CHARSET = re.compile(r"[A-Za-z0-9_-]+")
SHORT_CODE_PATTERN = re.compile(
    rf"[A-Za-z0-9_-]{{{SHORT_CODE_MIN_LENGTH},{SHORT_CODE_MAX_LENGTH}}}"
)


def is_valid_short_code(code: str) -> bool:
    """Full length and charset check. Short codes are case-sensitive, so no normalization."""
    return SHORT_CODE_PATTERN.fullmatch(code) is not None
