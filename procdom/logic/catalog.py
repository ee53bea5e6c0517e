"""
Resolve requested metric names to identifiers and descriptors.

All requested metrics must share one non-null instance domain, because the
profile and fetch checks operate on a single domain.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from procdom.logic.errors import DescriptorLookupError, DescriptorMismatchError, NameResolutionError
from procdom.protocols.metrics_service import MetricsServiceProtocol
from procdom.schemas.metrics import MetricDescriptor
from procdom_sdk.exceptions import MetricsServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedCatalog:
    """Resolved metrics, in request order, and their shared instance domain."""

    names: List[str]
    pmids: List[str]
    descriptors: List[MetricDescriptor]
    indom: str

    def name_of(self, pmid: str) -> str:
        for name, candidate in zip(self.names, self.pmids):
            if candidate == pmid:
                return name
        return pmid


class MetricCatalogResolver:
    """Resolves names, then descriptors, then enforces the shared-domain invariant."""

    def __init__(self, service: MetricsServiceProtocol):
        self.service = service

    def resolve_names(self, names: Sequence[str]) -> List[str]:
        try:
            pmids = self.service.lookup_names(names)
        except MetricsServiceError as e:
            raise NameResolutionError(list(names), message=f"name lookup failed: {e}") from e

        unknown = [name for name, pmid in zip(names, pmids) if pmid is None]
        if unknown:
            for name in unknown:
                logger.error(f"{name} - not known")
            raise NameResolutionError(unknown)
        return [pmid for pmid in pmids if pmid is not None]

    def resolve(self, names: Sequence[str]) -> ResolvedCatalog:
        """
        Resolve ``names`` to identifiers and descriptors.

        Raises:
            NameResolutionError: a name is unknown (all unknown names are reported)
            DescriptorLookupError: the batched descriptor call failed
            DescriptorMismatchError: the shared non-null domain invariant is broken
        """
        if not names:
            raise NameResolutionError([], message="no metrics requested")

        pmids = self.resolve_names(names)

        try:
            descriptors = self.service.lookup_descs(pmids)
        except MetricsServiceError as e:
            raise DescriptorLookupError(f"descriptor lookup failed: {e}") from e

        indom = descriptors[0].indom
        if indom is None:
            raise DescriptorMismatchError(names[0], None)

        for name, desc in zip(names[1:], descriptors[1:]):
            if desc.indom != indom:
                raise DescriptorMismatchError(name, desc.indom, expected_metric=names[0], expected_indom=indom)

        logger.debug(f"Resolved {len(pmids)} metrics on indom {indom}")
        return ResolvedCatalog(names=list(names), pmids=pmids, descriptors=descriptors, indom=indom)
