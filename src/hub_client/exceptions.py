# hub_client/exceptions.py

from typing import Any, Dict, Optional


class HubClientError(Exception):
    """Base exception for all errors raised by the Hub client."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


# --- Transport and configuration errors ---

class ApiError(HubClientError):
    """The Hub answered, but with an error status or an unusable body."""


class NetworkError(HubClientError):
    """The Hub could not be reached (connection failure, timeout, DNS...)."""


class AuthenticationError(HubClientError):
    """The Hub rejected the configured credentials."""


class ConfigurationError(HubClientError):
    """Client configuration (credentials, proxy settings) is invalid."""


class ValidationError(HubClientError):
    """User input or a notification payload failed validation."""


class ProjectNotFoundError(HubClientError):
    """No project with the requested name exists on the Hub."""


# --- Notification pipeline errors ---

class UnsupportedNotificationKind(HubClientError):
    """No transform is registered for the notification's kind."""


class EntityNotFound(HubClientError):
    """A remote resource referenced by a notification no longer exists."""


class LinkNotFound(HubClientError):
    """
    A named relation is missing from a fetched resource.

    Signals an API/version mismatch rather than ordinary data churn. Callers
    can tell it apart from EntityNotFound.
    """


class EntityResolutionError(HubClientError):
    """Any other failure while fetching or parsing a remote entity."""


class Cancelled(HubClientError):
    """The transform invocation was cancelled while in flight."""


class TransformError(HubClientError):
    """
    Wraps the failure that aborted a notification transform.

    The original exception is kept on ``cause`` (and as ``__cause__``) so
    callers can branch on the root cause.
    """

    def __init__(
        self,
        message: str,
        cause: Optional[HubClientError] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        if code is None and cause is not None:
            code = cause.code
        super().__init__(message, code=code, details=details)
        self.cause = cause
