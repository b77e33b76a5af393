"""Exception taxonomy for the Study Planner service.

Every error carries the HTTP status it maps to and a stable machine code,
so the application-level handler can render them uniformly as::

    {"error": {"code": ..., "message": ..., "details": {...}}}
"""

from typing import Any, Dict, Optional


class PlannerError(Exception):
    """Base exception for the service."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(PlannerError):
    """Malformed caller input (empty topic, bad step index, ...)."""

    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(PlannerError):
    """Credentials did not match a known user."""

    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class NotFoundError(PlannerError):
    """Resource missing or not owned by the caller."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(PlannerError):
    """Duplicate-key style failure reported by the storage layer."""

    status_code = 409
    code = "CONFLICT"


class ExternalServiceError(PlannerError):
    """The generative-text backend failed or returned garbage.

    Raised inside the plan synthesizer only; it is always absorbed there
    and never reaches a route handler.
    """

    status_code = 502
    code = "EXTERNAL_SERVICE_ERROR"
