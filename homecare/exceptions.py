"""
Scheduling error taxonomy.

Every error raised by the scheduling core derives from SchedulingError and is
mapped onto an HTTP response by the handlers registered in main.py. The core
never retries; callers decide whether an operation is safe to repeat.
"""

from typing import Optional


class SchedulingError(Exception):
    """Base class for errors surfaced by the scheduling core"""

    status_code = 500

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        payload = {"error": self.message}
        if self.field:
            payload["field"] = self.field
        return payload


class ValidationError(SchedulingError):
    """Malformed or missing input. Raised before any transaction is opened."""

    status_code = 400


class NotFoundError(SchedulingError):
    """A referenced assignment, rule, visit, client or caregiver does not exist"""

    status_code = 404


class ConflictError(SchedulingError):
    """Reserved for stricter invariant enforcement (e.g. rejecting overlapping rules)"""

    status_code = 409


class TransactionFailure(SchedulingError):
    """An atomic read-modify-write could not complete and was rolled back"""

    status_code = 500


class StorageUnavailable(SchedulingError):
    """A read against the backing store failed or timed out"""

    status_code = 503
