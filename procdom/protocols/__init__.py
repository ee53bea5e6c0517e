from .metrics_service import MetricsServiceProtocol

__all__ = ["MetricsServiceProtocol"]
