from .indoms import InstanceDomainResource
from .metrics import MetricsResource

__all__ = ["InstanceDomainResource", "MetricsResource"]
