"""Request validation and payload normalization.

The gatekeeper runs before any external call: it checks the HTTP method,
the optional shared-secret header and turns the raw body into a
`PetitionSubmission`. Rejections raise `RequestRejected` subclasses so
the route can answer with the matching status code.
"""

import json
from typing import Any, Optional, Union

from .errors import MethodNotAllowed, Unauthorized
from .schemas import PetitionSubmission

API_KEY_HEADER = "X-API-Key"


def ensure_method(method: str) -> None:
    """Only POST submissions are accepted (preflight is answered earlier)."""
    if method.upper() != "POST":
        raise MethodNotAllowed()


def check_api_key(supplied: Optional[str], expected: Optional[str]) -> None:
    """Compare the caller's key with the configured one.

    The check is skipped entirely when no key is configured.
    """
    if not expected:
        return
    if supplied != expected:
        raise Unauthorized()


def parse_body(raw: Union[bytes, str, dict, None]) -> dict:
    """Decode the request body into a dict.

    Accepts raw bytes, a JSON string (including a JSON document that is
    itself a JSON-encoded string) or an already decoded object. Invalid
    JSON raises `ValueError`; valid JSON that is not an object yields an
    empty dict.
    """
    body: Any = raw
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    if isinstance(body, str):
        body = json.loads(body) if body.strip() else {}
        # clients that post JSON.stringify output as a JSON string
        if isinstance(body, str):
            body = json.loads(body) if body.strip() else {}
    if not isinstance(body, dict):
        return {}
    return body


def normalize(payload: dict) -> PetitionSubmission:
    """Build the normalized record; missing or malformed fields fall back to defaults."""
    return PetitionSubmission.model_validate(payload)


def parse_submission(raw: Union[bytes, str, dict, None]) -> PetitionSubmission:
    return normalize(parse_body(raw))
