"""Input validation helpers for resource documents.

Checks run before any request is built, so an invalid document never
reaches the network.
"""
from __future__ import annotations
from typing import Any, Iterable

from verifyctl.core.verify.exceptions import ValidationError


def ensure_mapping(document: Any) -> dict:
    """Return the document if it is a JSON/YAML object.

    Raises:
        ValidationError: If the document is not a mapping
    """
    if not isinstance(document, dict):
        raise ValidationError("document", "Resource document must be an object")
    return document


def require_string(document: dict, field: str) -> str:
    """Validate a required, non-blank string field.

    Args:
        document: Resource document
        field: Field name

    Returns:
        Field value

    Raises:
        ValidationError: If the field is missing, blank or not a string
    """
    value = document.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, f"{field} is required")
    return value


def require_list(document: dict, field: str) -> list:
    """Validate a required, non-empty list field."""
    value = document.get(field)
    if not isinstance(value, list) or not value:
        raise ValidationError(field, f"{field} list is required")
    return value


def validate_document(
    document: Any,
    required_fields: Iterable[str] = (),
    required_lists: Iterable[str] = (),
) -> dict:
    """Run every required-field check and return the document."""
    document = ensure_mapping(document)
    for field in required_fields:
        require_string(document, field)
    for field in required_lists:
        require_list(document, field)
    return document
