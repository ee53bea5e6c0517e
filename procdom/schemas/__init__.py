from .metrics import (
    FetchResult,
    Instance,
    InstanceDomainSnapshot,
    InstanceValue,
    MetricDescriptor,
    MetricValueSet,
    NameFormat,
    Profile,
)
from .results import CheckOutcome, CheckRecord, RunReport

__all__ = [
    "FetchResult",
    "Instance",
    "InstanceDomainSnapshot",
    "InstanceValue",
    "MetricDescriptor",
    "MetricValueSet",
    "NameFormat",
    "Profile",
    "CheckOutcome",
    "CheckRecord",
    "RunReport",
]
