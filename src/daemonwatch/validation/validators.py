"""
Validation functions for configuration values and CLI arguments.
"""

from typing import Any, List, Optional

from .exceptions import ValidationError


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a positive float.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    """Validate that a value is a string with non-whitespace content."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value.strip()


def validate_name_list(
    value: Any,
    max_items: int,
    field_name: str = "value"
) -> List[str]:
    """
    Validate a short list of unique process names.

    Args:
        value: Value to validate
        max_items: Maximum number of names allowed
        field_name: Name of the field being validated

    Returns:
        The names, stripped, in their original order

    Raises:
        ValidationError: If the list is empty, too long, or holds non-strings
    """
    if not isinstance(value, list) or not value:
        raise ValidationError(
            f"{field_name} must be a non-empty list",
            field_name=field_name,
            value=value
        )
    if len(value) > max_items:
        raise ValidationError(
            f"{field_name} may hold at most {max_items} names, got {len(value)}",
            field_name=field_name,
            value=value
        )

    names: List[str] = []
    for i, item in enumerate(value):
        name = validate_non_empty_string(item, field_name=f"{field_name}[{i}]")
        if name in names:
            raise ValidationError(
                f"{field_name} contains duplicate name '{name}'",
                field_name=field_name,
                value=value
            )
        names.append(name)
    return names
