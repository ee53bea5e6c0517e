"""
Session-scoped client for the metrics service.

Example:
    with MetricsServiceClient("http://localhost:44322", host="localhost") as client:
        pmids = client.lookup_names(["proc.psinfo.pid"])
"""

import logging
from typing import List, Optional, Sequence

from procdom.schemas.metrics import FetchResult, Instance, MetricDescriptor, Profile

from .exceptions import MetricsServiceError, TransportError
from .resources import InstanceDomainResource, MetricsResource
from .transport import Transport

logger = logging.getLogger(__name__)


class MetricsServiceClient:
    """
    Synchronous client bound to a single remote session.

    The session holds the profile and fetch context. It is created on
    ``open()`` (or entering the context manager) and destroyed on ``close()``,
    which also runs when a ``with`` block exits through an exception.
    """

    def __init__(self, base_url: str, host: str = "localhost", timeout: Optional[float] = None):
        self.host = host
        self._transport = Transport(base_url, timeout=timeout)
        self.session_id: Optional[str] = None
        self._metrics: Optional[MetricsResource] = None
        self._indoms: Optional[InstanceDomainResource] = None

    def __enter__(self) -> "MetricsServiceClient":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        if self.session_id is not None:
            return
        result = self._transport.request("POST", "/v1/sessions", json={"host": self.host}) or {}
        session_id = result.get("session_id")
        if not session_id:
            raise TransportError(f"cannot create session for host {self.host!r}: {result!r}")
        self.session_id = str(session_id)
        session_path = f"/v1/sessions/{self.session_id}"
        self._metrics = MetricsResource(self._transport, session_path)
        self._indoms = InstanceDomainResource(self._transport, session_path)
        logger.debug(f"Opened session {self.session_id} on {self.host}")

    def close(self) -> None:
        """Destroy the remote session and release the HTTP connection pool."""
        try:
            if self.session_id is not None:
                try:
                    self._transport.request("DELETE", f"/v1/sessions/{self.session_id}")
                except MetricsServiceError as e:
                    logger.warning(f"Failed to destroy session {self.session_id}: {e}")
                logger.debug(f"Closed session {self.session_id}")
        finally:
            self.session_id = None
            self._metrics = None
            self._indoms = None
            self._transport.close()

    @property
    def metrics(self) -> MetricsResource:
        if self._metrics is None:
            raise RuntimeError("Session is not open")
        return self._metrics

    @property
    def indoms(self) -> InstanceDomainResource:
        if self._indoms is None:
            raise RuntimeError("Session is not open")
        return self._indoms

    # MetricsServiceProtocol

    def lookup_names(self, names: Sequence[str]) -> List[Optional[str]]:
        return self.metrics.lookup_names(names)

    def lookup_descs(self, pmids: Sequence[str]) -> List[MetricDescriptor]:
        return self.metrics.lookup_descs(pmids)

    def get_indom(self, indom: str) -> List[Instance]:
        return self.indoms.get_indom(indom)

    def lookup_instance(self, indom: str, name: str) -> int:
        return self.indoms.lookup_instance(indom, name)

    def instance_name(self, indom: str, inst: int) -> str:
        return self.indoms.instance_name(indom, inst)

    def delete_profile(self, indom: str) -> None:
        self.indoms.delete_profile(indom)

    def add_profile(self, indom: str, instances: Sequence[int]) -> None:
        self.indoms.add_profile(indom, instances)

    def describe_profile(self, indom: str) -> Profile:
        return self.indoms.describe_profile(indom)

    def fetch(self, pmids: Sequence[str]) -> FetchResult:
        return self.metrics.fetch(pmids)

    def store(self, result: FetchResult) -> None:
        self.metrics.store(result)
