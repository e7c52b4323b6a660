"""Errors raised by load test panel operations."""


class PanelError(Exception):
    """Base class for errors surfaced to callers of the panel operations."""

    http_status = 500


class ConfigurationError(PanelError):
    """Raised when the GitHub credential is not configured."""


class ValidationError(PanelError):
    """Raised when a trigger request is malformed."""

    http_status = 400


class UpstreamError(PanelError):
    """Raised when GitHub rejects or fails a required call."""


class NotFoundError(PanelError):
    """Raised when no workflow run correlates with a test identifier."""

    http_status = 404
