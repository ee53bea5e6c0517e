"""
Remote capability protocol for the metrics service.

The verifier only talks to the service through this interface, so any
transport satisfying these contracts can be plugged in. Implementations raise
``procdom_sdk.exceptions.MetricsServiceError`` subclasses on failure; in
particular single-instance lookups must raise ``InstanceNotFoundError`` for an
instance that is not part of the domain, and ``store`` must raise
``AccessDeniedError`` or ``PermissionDeniedError`` when writes are refused.
"""

from typing import List, Optional, Protocol, Sequence

from procdom.schemas.metrics import FetchResult, Instance, MetricDescriptor, Profile


class MetricsServiceProtocol(Protocol):
    """Operations the verifier consumes from the metrics service."""

    def lookup_names(self, names: Sequence[str]) -> List[Optional[str]]:
        """Resolve metric names to identifiers; None marks an unknown name."""
        ...

    def lookup_descs(self, pmids: Sequence[str]) -> List[MetricDescriptor]:
        """Fetch descriptors for all identifiers in one batched call."""
        ...

    def get_indom(self, indom: str) -> List[Instance]:
        """Enumerate every instance currently in the domain."""
        ...

    def lookup_instance(self, indom: str, name: str) -> int:
        """Name to id lookup of a single instance."""
        ...

    def instance_name(self, indom: str, inst: int) -> str:
        """Id to name lookup of a single instance."""
        ...

    def delete_profile(self, indom: str) -> None:
        """Remove every instance from the session's profile for ``indom``."""
        ...

    def add_profile(self, indom: str, instances: Sequence[int]) -> None:
        """Add instances to the session's profile for ``indom``."""
        ...

    def describe_profile(self, indom: str) -> Profile:
        """Report the profile currently active in this session."""
        ...

    def fetch(self, pmids: Sequence[str]) -> FetchResult:
        """Fetch current values, filtered by the active profile."""
        ...

    def store(self, result: FetchResult) -> None:
        """Write a previously fetched result back to the service."""
        ...
