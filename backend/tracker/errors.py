"""Domain errors raised by services and translated to HTTP by the API.

Each error carries the HTTP status it maps to and a human-readable
message that is safe to return to clients.
"""


class TrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(TrackerError, ValueError):
    """Malformed, missing or out-of-range input."""
    status_code = 400


class AuthenticationFailed(TrackerError):
    """Missing, invalid or expired token, or bad credentials."""
    status_code = 401


class NotFound(TrackerError, LookupError):
    """Resource does not exist or is not owned by the caller."""
    status_code = 404


class Conflict(TrackerError):
    """Unique constraint violated (duplicate email)."""
    status_code = 409
