"""
Runkeeper connector errors.
"""
from typing import Any, Dict, Optional


class RunkeeperError(Exception):
    """Base class for all connector errors."""


class TransportError(RunkeeperError):
    """The Health Graph API could not be reached."""

    def __init__(self, message: str, request: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.request = request or {}


class ServiceError(RunkeeperError):
    """The Health Graph API answered with a non-2xx status or an unreadable body."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        request: Optional[Dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.request = request or {}
        self.response_text = response_text


class ConfigurationError(RunkeeperError):
    """Unknown resource type, unknown URI key or missing credentials."""


class BootstrapError(RunkeeperError):
    """The /user call failed; no resource can be fetched in this run."""
