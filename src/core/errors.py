"""
Error taxonomy for pipeline and workflow configuration.

- Validation failures block a save locally, no request is issued
- Persistence failures carry the message returned by the configuration API
- Transport failures carry a generic message

None of these are fatal; every failure is recoverable by retrying.
"""

from typing import Optional


class PipelineConfigError(Exception):
    """Base class for all configuration errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationValidationError(PipelineConfigError, ValueError):
    """A configuration or rule failed the client-side save gate."""


class UnknownTemplateError(PipelineConfigError, ValueError):
    """Requested starter template does not exist."""

    def __init__(self, kind: str):
        super().__init__(f"Unknown pipeline template: {kind}")
        self.kind = kind


class PersistenceError(PipelineConfigError):
    """The configuration API answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(PersistenceError):
    """The configuration API could not be reached."""

    def __init__(self, message: str = "Unable to reach the configuration service"):
        super().__init__(message, status_code=None)
