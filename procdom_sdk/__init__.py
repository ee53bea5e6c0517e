"""
procdom SDK - synchronous client for the metrics service.
"""

from .client import MetricsServiceClient
from .exceptions import (
    AccessDeniedError,
    InstanceNotFoundError,
    MetricsServiceError,
    PermissionDeniedError,
    TransportError,
    UnknownMetricError,
)
from .transport import Transport

__all__ = [
    "MetricsServiceClient",
    "Transport",
    "MetricsServiceError",
    "TransportError",
    "UnknownMetricError",
    "InstanceNotFoundError",
    "AccessDeniedError",
    "PermissionDeniedError",
]
