"""
Shared fixtures: an in-memory metrics service and a fake process filesystem.
"""

from typing import Dict, FrozenSet, List, Optional, Sequence, Set

import pytest

from procdom.schemas.metrics import (
    FetchResult,
    Instance,
    InstanceValue,
    MetricDescriptor,
    MetricValueSet,
    Profile,
)
from procdom_sdk.exceptions import InstanceNotFoundError, PermissionDeniedError, UnknownMetricError

PROC_INDOM = "3.9"


class FakeMetricsService:
    """In-memory implementation of MetricsServiceProtocol.

    ``instances`` is the live domain. Ids in ``vanish_after_snapshot`` are
    dropped from it as soon as the domain has been enumerated, which models
    processes exiting between the snapshot and the lookups.
    """

    def __init__(self, instances: Optional[Dict[int, str]] = None, indom: str = PROC_INDOM):
        self.indom = indom
        self.instances: Dict[int, str] = dict(instances or {})
        self.descriptors: Dict[str, MetricDescriptor] = {}
        self.vanish_after_snapshot: Set[int] = set()
        self.profile: Optional[FrozenSet[int]] = None
        self.profile_calls: List[str] = []
        self.fetch_calls = 0
        self.extra_fetch_instances: List[int] = []
        self.fetch_status: Dict[str, int] = {}
        self.store_error: Optional[Exception] = PermissionDeniedError("no permission", code="permission")
        self.stored: List[FetchResult] = []
        self.name_lookup_error: Optional[Exception] = None
        self.id_lookup_error: Optional[Exception] = None
        self.name_overrides: Dict[int, str] = {}

        for i, name in enumerate(["proc.psinfo.pid", "proc.psinfo.ppid", "proc.memory.rss"]):
            self.add_metric(name, f"3.8.{i}", indom)

    def add_metric(self, name: str, pmid: str, indom: Optional[str]) -> None:
        self.descriptors[name] = MetricDescriptor(name=name, pmid=pmid, indom=indom, type="u32")

    def _by_pmid(self, pmid: str) -> MetricDescriptor:
        for desc in self.descriptors.values():
            if desc.pmid == pmid:
                return desc
        raise UnknownMetricError(f"unknown pmid {pmid}", code="unknown_metric")

    def lookup_names(self, names: Sequence[str]) -> List[Optional[str]]:
        return [self.descriptors[n].pmid if n in self.descriptors else None for n in names]

    def lookup_descs(self, pmids: Sequence[str]) -> List[MetricDescriptor]:
        return [self._by_pmid(p) for p in pmids]

    def get_indom(self, indom: str) -> List[Instance]:
        result = [Instance(id=i, name=n) for i, n in sorted(self.instances.items())]
        for inst in self.vanish_after_snapshot:
            self.instances.pop(inst, None)
        return result

    def lookup_instance(self, indom: str, name: str) -> int:
        if self.name_lookup_error is not None:
            raise self.name_lookup_error
        for inst, candidate in self.instances.items():
            if candidate == name:
                return inst
        raise InstanceNotFoundError(f"unknown instance {name!r}", code="instance_not_found")

    def instance_name(self, indom: str, inst: int) -> str:
        if self.id_lookup_error is not None:
            raise self.id_lookup_error
        if inst not in self.instances:
            raise InstanceNotFoundError(f"unknown instance {inst}", code="instance_not_found")
        return self.name_overrides.get(inst, self.instances[inst])

    def delete_profile(self, indom: str) -> None:
        self.profile_calls.append("delete")
        self.profile = frozenset()

    def add_profile(self, indom: str, instances: Sequence[int]) -> None:
        self.profile_calls.append("add")
        self.profile = (self.profile or frozenset()) | frozenset(instances)

    def describe_profile(self, indom: str) -> Profile:
        return Profile(indom=indom, instances=self.profile)

    def fetch(self, pmids: Sequence[str]) -> FetchResult:
        self.fetch_calls += 1
        selected = [i for i in sorted(self.instances) if self.profile is None or i in self.profile]
        selected += self.extra_fetch_instances
        values = []
        for p in pmids:
            status = self.fetch_status.get(p, 0)
            if status < 0:
                values.append(MetricValueSet(pmid=p, status=status))
            else:
                values.append(
                    MetricValueSet(pmid=p, instances=[InstanceValue(instance=i, value=i) for i in selected])
                )
        return FetchResult(values=values)

    def store(self, result: FetchResult) -> None:
        self.stored.append(result)
        if self.store_error is not None:
            raise self.store_error


@pytest.fixture
def fake_service():
    """A service with init, httpd and a shell under a 5-digit fixed-width naming."""
    return FakeMetricsService({1: "00001 init", 100: "00100 init", 4096: "04096 httpd", 7: "00007 sh"})


@pytest.fixture
def make_service():
    """The FakeMetricsService class, for tests that build their own domain."""
    return FakeMetricsService


@pytest.fixture
def fake_procfs(tmp_path):
    """Factory building a directory of numeric entries."""

    def _make(*names: str):
        root = tmp_path / "proc"
        root.mkdir()
        for name in names:
            (root / name).mkdir()
        return root

    return _make
