"""Metric namespace, descriptor, fetch and store resource for the procdom SDK."""

from typing import List, Optional, Sequence

from pydantic import ValidationError

from procdom.schemas.metrics import FetchResult, MetricDescriptor

from ..exceptions import TransportError
from ..transport import Transport


class MetricsResource:
    """
    Metric-level operations within one session.

    Names resolve to opaque identifiers; descriptors and fetches are batched
    over a list of identifiers, in request order.
    """

    def __init__(self, transport: Transport, session_path: str):
        self._transport = transport
        self._base = session_path

    def lookup_names(self, names: Sequence[str]) -> List[Optional[str]]:
        """
        Resolve metric names.

        Returns:
            One identifier per name, None where the name is unknown.
        """
        result = self._transport.request("POST", f"{self._base}/metrics/lookup", json={"names": list(names)})
        pmids = (result or {}).get("pmids")
        if not isinstance(pmids, list) or len(pmids) != len(names):
            raise TransportError(f"metrics/lookup returned {pmids!r} for {len(names)} names")
        return [str(p) if p is not None else None for p in pmids]

    def lookup_descs(self, pmids: Sequence[str]) -> List[MetricDescriptor]:
        result = self._transport.request("POST", f"{self._base}/metrics/descriptors", json={"pmids": list(pmids)})
        descriptors = (result or {}).get("descriptors")
        if not isinstance(descriptors, list) or len(descriptors) != len(pmids):
            raise TransportError(f"metrics/descriptors returned {len(descriptors or [])} for {len(pmids)} ids")
        try:
            return [MetricDescriptor.model_validate(d) for d in descriptors]
        except ValidationError as e:
            raise TransportError(f"metrics/descriptors returned a malformed descriptor: {e}") from e

    def fetch(self, pmids: Sequence[str]) -> FetchResult:
        result = self._transport.request("POST", f"{self._base}/fetch", json={"pmids": list(pmids)})
        try:
            return FetchResult.model_validate(result or {})
        except ValidationError as e:
            raise TransportError(f"fetch returned a malformed result: {e}") from e

    def store(self, result: FetchResult) -> None:
        self._transport.request("POST", f"{self._base}/store", json=result.to_wire())
