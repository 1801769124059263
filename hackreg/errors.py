# hackreg/errors.py
"""Error taxonomy surfaced to clients as ``{"error": "<message>"}``."""


class PortalError(Exception):
    """Base class for errors with a known HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(PortalError):
    """Missing or malformed field, or a cross-field rule failed."""
    status_code = 400


class DuplicateMember(PortalError):
    """A user with the same email or contact (or a team with the same id) exists."""
    status_code = 400


class TeamInvariantViolated(PortalError):
    """Roster size mismatch, or a member already linked to another team."""
    status_code = 400


class NotFound(PortalError):
    status_code = 404


class NotAuthenticated(PortalError):
    """Missing, tampered or expired admin session."""
    status_code = 401
