"""Error types raised while handling a petition submission.

Rejections carry the HTTP status and plain-text body returned to the
caller. Everything else is reported by the route as a 500.
"""


class PetitionError(Exception):
    """Base class for petition handling failures."""


class RequestRejected(PetitionError):
    status_code = 400
    detail = "Bad request"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class MethodNotAllowed(RequestRejected):
    status_code = 405
    detail = "Method not allowed"


class Unauthorized(RequestRejected):
    status_code = 401
    detail = "Unauthorized"


class ConfigurationError(PetitionError):
    """A required deployment variable is missing or invalid."""


class StorageInsertError(PetitionError):
    """The storage backend reported a failed insert."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
