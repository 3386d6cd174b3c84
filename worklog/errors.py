"""Error kinds raised by the services and mapped to HTTP status by the routers."""
from typing import Optional


class WorklogError(ValueError):
    """Base class for client-facing service errors."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    @property
    def detail(self):
        """HTTP error detail: plain message, or field + message for parameters."""
        if self.field:
            return {"field": self.field, "message": self.message}
        return self.message


class InvalidFormat(WorklogError):
    """A date/time string did not match the expected pattern."""


class InvalidRange(WorklogError):
    """End not after start, or end beyond the future-skew allowance."""


class OverlapViolation(WorklogError):
    """Candidate entry overlaps an existing one by more than the tolerance."""


class InvalidProject(WorklogError):
    """Billable flag and hourly rate are inconsistent."""


class NotFound(WorklogError):
    """Unknown or foreign-owned project, entry or user."""

    status_code = 404


class PartialFailure(WorklogError):
    """A two-step write completed its first step only."""

    status_code = 500


class EmailTaken(WorklogError):
    """Registration with an email that already has an account."""


class InvalidCredentials(WorklogError):
    """Unknown email or wrong password."""

    status_code = 401
