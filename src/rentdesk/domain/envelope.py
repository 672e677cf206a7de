"""Validation of the {success, data} envelope every backend endpoint returns."""

from typing import Any, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from rentdesk.core.exceptions import InvalidResponseError


class Envelope(BaseModel):
    """Backend response wrapper."""

    success: bool
    data: Any = None


def unwrap(body: Any, key: Optional[str] = None) -> Any:
    """
    Return the payload carried by an envelope.

    With ``key`` the payload is the list at ``data[key]``; without it the
    payload is the ``data`` object itself. Raises InvalidResponseError when
    ``success`` is not true or the payload is missing or has the wrong shape.
    An empty list is a valid payload.
    """
    try:
        envelope = Envelope.model_validate(body)
    except PydanticValidationError as exc:
        raise InvalidResponseError() from exc

    if not envelope.success or not isinstance(envelope.data, dict):
        raise InvalidResponseError()

    if key is None:
        return envelope.data

    payload = envelope.data.get(key)
    if not isinstance(payload, list):
        raise InvalidResponseError()
    return payload


def unwrap_or_empty(body: Any, key: str) -> list:
    """Lenient variant for fault-tolerant callers: malformed envelopes give []."""
    try:
        return unwrap(body, key)
    except InvalidResponseError:
        return []
