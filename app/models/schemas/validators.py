"""Shared validators for Pydantic schemas."""

from typing import Optional


def validate_code(v: Optional[str], field_name: str = "Code") -> str:
    """Validate and clean a document code or identifier.

    Args:
        v: The string value to validate
        field_name: Name used in the error message

    Returns:
        Stripped string

    Raises:
        ValueError: If the value is missing or blank
    """
    if v is None or not str(v).strip():
        raise ValueError(f"{field_name} cannot be empty")
    return str(v).strip()
