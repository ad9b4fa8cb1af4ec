"""
Sanitization of user-provided column names and values.
"""
import re
from typing import Any

MAX_COLUMN_NAME_LENGTH = 1000

# Tabs and newlines are common in spreadsheet headers; other control characters are not
_UNSAFE_NAME_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def sanitize_for_logging(value: Any, max_length: int = 200) -> str:
    """
    Render a value safely for a single log line (prevents log injection).

    Args:
        value: Value to render; non-strings are converted with str()
        max_length: Maximum length before truncation

    Returns:
        Single-line string without control characters
    """
    if value is None:
        return ""

    text = re.sub(r'[\r\n]', ' ', str(value))
    text = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', text)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text


def validate_column_name(name: Any) -> bool:
    """True when a header is a non-empty string without unsafe control characters."""
    if not isinstance(name, str) or not name.strip():
        return False
    if len(name) > MAX_COLUMN_NAME_LENGTH:
        return False
    return _UNSAFE_NAME_CHARS.search(name) is None
