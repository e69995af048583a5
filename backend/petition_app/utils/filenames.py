"""Download filename helpers."""

import re
from urllib.parse import quote

from ..schemas import PetitionSubmission

# \w on str patterns covers Unicode letters, digits and underscore
_UNSAFE_RUN = re.compile(r"[^\w-]+")
MAX_LENGTH = 80
PLACEHOLDER = "dilekce"


def sanitize_filename(value: str) -> str:
    """Replace runs of characters outside letters/digits/_/- with `_` and cap the length."""
    cleaned = _UNSAFE_RUN.sub("_", str(value or PLACEHOLDER))[:MAX_LENGTH]
    return cleaned or PLACEHOLDER


def petition_filename(submission: PetitionSubmission) -> str:
    stem = f"{submission.student_number}_{submission.given_name}_{submission.family_name}"
    return f"Dilekce_{sanitize_filename(stem)}.pdf"


def content_disposition(filename: str) -> str:
    """Build an attachment header value carrying the UTF-8 filename.

    The quoted `filename` holds the raw name and `filename*` the RFC 5987
    encoded form for clients that prefer it.
    """
    return f"attachment; filename=\"{filename}\"; filename*=UTF-8''{quote(filename)}"
