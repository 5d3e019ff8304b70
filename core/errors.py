"""
Inquiry Service Error Kinds

Custom exceptions for each failure class of the submission pipeline, with
the HTTP status they map to and a structured form for logging.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class InquiryServiceError(Exception):
    """Base exception for all inquiry pipeline errors."""

    status_code = 500

    def __init__(self, message: str, component: str = "unknown",
                 context: Optional[Dict[str, Any]] = None):
        """Initialize with metadata.

        Args:
            message: Error message, safe to show to the submitter
            component: Pipeline component where the error occurred
            context: Additional context data for logs
        """
        self.message = message
        self.component = component
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured log format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class MalformedRequestError(InquiryServiceError):
    """Raised for unparsable bodies or unsupported methods."""

    status_code = 400

    def __init__(self, message: str, status_code: int = 400,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, component="request", context=context)
        self.status_code = status_code


class InquiryValidationError(InquiryServiceError):
    """Raised when a submission fails field validation."""

    status_code = 400

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, component="validator", context=context)


class RelayError(InquiryServiceError):
    """Raised when an outbound relay call is rejected or cannot be made."""

    status_code = 500

    def __init__(self, message: str, relay: str,
                 upstream_status: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        if upstream_status is not None:
            context["upstream_status"] = upstream_status
        super().__init__(message, component=relay, context=context)
        self.relay = relay
        self.upstream_status = upstream_status


class PersistenceError(InquiryServiceError):
    """Raised when the inquiry log cannot be written. Never shown to callers."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, component="inquiry_log", context=context)
