"""
Shared validators for input sanitization.
"""

import re

from shared.config.constants import Limits

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def validate_quantity(
    quantity: int,
    min_val: int = Limits.MIN_QUANTITY,
    max_val: int = Limits.MAX_QUANTITY,
) -> int:
    """
    Validate quantity is within acceptable range.

    Raises:
        ValueError: If quantity is outside allowed range
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValueError("Quantity must be an integer")
    if quantity < min_val:
        raise ValueError(f"Quantity must be at least {min_val}")
    if quantity > max_val:
        raise ValueError(f"Quantity must be at most {max_val}")
    return quantity


def sanitize_text(value: str | None, max_length: int = Limits.MAX_NOTES_LENGTH) -> str | None:
    """
    Trim free text, drop control characters and cap its length.

    Newlines and tabs are kept. Empty results collapse to None.
    """
    if value is None:
        return None

    value = _CONTROL_CHARS.sub("", value).strip()
    if len(value) > max_length:
        value = value[:max_length]

    return value or None
