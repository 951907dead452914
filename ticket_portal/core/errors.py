"""Error taxonomy for backend, session, and authorization failures."""

from __future__ import annotations


class PortalError(RuntimeError):
    """Base class for failures caught at the action boundary."""


class ConfigurationError(PortalError):
    """Backend URL or key missing; repository operations are disabled."""


class SessionError(PortalError):
    """No valid authenticated session when one is required."""


class AuthorizationError(PortalError):
    """Admin capability required but not granted."""


class RepositoryError(PortalError):
    """Transport or backend-side failure on a table operation.

    ``stage`` names the step that failed ("fetch", "persist", "delete", ...)
    so callers can report multi-step failures distinctly.
    """

    def __init__(self, message: str, *, stage: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.stage = stage
        self.status_code = status_code


class ConcurrencyConflictError(RepositoryError):
    """A versioned write kept losing to concurrent writers."""
