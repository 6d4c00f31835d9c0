"""
Input Validators - Generic validation for user input at system boundaries.

Parse at the boundary: validate and type-check all external input
before it enters the system. Everything here raises ValidationError, which
the API turns into a 400 and the CLI into a non-zero exit.
"""

import logging

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when input validation fails. Contains a user-friendly message."""

    pass


def validate_list_size(
    items: list,
    field_name: str = "list",
    max_items: int = 100,
    min_items: int = 0,
) -> list:
    """Validate that a list has between min_items and max_items entries."""
    if len(items) < min_items:
        if min_items == 1:
            raise ValidationError(f"{field_name} cannot be empty")
        raise ValidationError(
            f"{field_name} must have at least {min_items} items (got {len(items)})"
        )
    if len(items) > max_items:
        raise ValidationError(
            f"{field_name} cannot have more than {max_items} items (got {len(items)})"
        )
    return items
