"""Maps HTTP responses onto the Verify error taxonomy.

This is the only place that interprets failure status codes. Resource kinds,
the name resolver and login all go through it.
"""
from __future__ import annotations
import json
from typing import Iterable, Optional, Union

import requests

from .exceptions import (
    BadRequestError,
    ClassifiedError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    UnclassifiedError,
)

DEFAULT_MESSAGE = "unable to complete the request"

Expected = Union[int, Iterable[int], None]


def _is_expected(status: int, expected: Expected) -> bool:
    if expected is None:
        return 200 <= status < 300
    if isinstance(expected, int):
        return status == expected
    return status in tuple(expected)


def _bad_request(body: str, default_message: str) -> BadRequestError:
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
    if isinstance(payload, dict) and ("messageId" in payload or "messageDescription" in payload):
        message_id = payload.get("messageId") or ""
        description = payload.get("messageDescription") or ""
        return BadRequestError(
            f"{message_id} {description}".strip(),
            message_id=message_id or None,
            status_code=400,
            body=body,
        )
    return BadRequestError(default_message, status_code=400, body=body)


def classify(
    response: requests.Response,
    expected: Expected = None,
    default_message: str = DEFAULT_MESSAGE,
) -> Optional[ClassifiedError]:
    """Classify a completed response.

    Args:
        response: Response to inspect
        expected: Success status (or statuses); any 2xx when omitted
        default_message: Detail used for a 400 whose body is not a service error

    Returns:
        None on success, otherwise the classified error
    """
    status = response.status_code
    if _is_expected(status, expected):
        return None

    body = response.text or ""
    if status == 401:
        return UnauthenticatedError(status_code=status, body=body)
    if status == 403:
        return ForbiddenError(status_code=status, body=body)
    if status == 404:
        return NotFoundError(status_code=status, body=body)
    if status == 400:
        return _bad_request(body, default_message)
    return UnclassifiedError(status, body)


def raise_for_response(
    response: requests.Response,
    expected: Expected = None,
    default_message: str = DEFAULT_MESSAGE,
) -> None:
    """Raise the classified error for ``response``, if any."""
    error = classify(response, expected=expected, default_message=default_message)
    if error is not None:
        raise error
