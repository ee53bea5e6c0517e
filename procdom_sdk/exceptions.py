"""
Typed errors raised by the metrics service client.

Every failure reported by the service is mapped onto one of these classes so
callers can tell an expected "not found" or "permission" outcome apart from
anything else.
"""

from typing import Any, Dict, Optional


class MetricsServiceError(Exception):
    """Base class for all errors returned by the metrics service."""

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} [{self.code}]"
        return self.message


class TransportError(MetricsServiceError):
    """Raised when the service cannot be reached or returns an unreadable response."""


class UnknownMetricError(MetricsServiceError):
    """Raised when a metric name or identifier is not known to the service."""


class InstanceNotFoundError(MetricsServiceError):
    """Raised when an instance is not (or no longer) part of its instance domain."""


class AccessDeniedError(MetricsServiceError):
    """POSIX-style access denial (EACCES)."""


class PermissionDeniedError(MetricsServiceError):
    """Service-specific permission failure."""


ERROR_CODE_MAP: Dict[str, type] = {
    "instance_not_found": InstanceNotFoundError,
    "unknown_metric": UnknownMetricError,
    "access_denied": AccessDeniedError,
    "permission": PermissionDeniedError,
}


def error_from_payload(payload: Any, status_code: int) -> MetricsServiceError:
    """Build the matching exception from an ``{"error": {...}}`` response body."""
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return MetricsServiceError(f"HTTP {status_code} without error body", status_code=status_code)

    code = str(error.get("code") or "")
    message = str(error.get("message") or f"HTTP {status_code}")
    exc_class = ERROR_CODE_MAP.get(code, MetricsServiceError)
    return exc_class(message, code=code or None, status_code=status_code)
