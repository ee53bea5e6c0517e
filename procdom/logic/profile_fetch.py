"""
Profile-restricted fetch checks.

Round 1 sets the profile to {own pid, parent pid} and checks that every
returned instance belongs to that set. Round 2 sets the profile to the whole
snapshot and only requires the fetch to succeed. Setting a profile always
deletes the previous one first; profiles are never extended in place.

In both rounds a negative per-metric status is a failed fetch.
"""

import logging
from typing import Iterable, List, Optional

from procdom.logic.catalog import ResolvedCatalog
from procdom.logic.check_log import CheckLog
from procdom.logic.errors import FetchError, ProfileViolation
from procdom.protocols.metrics_service import MetricsServiceProtocol
from procdom.schemas.metrics import FetchResult, InstanceDomainSnapshot, Profile
from procdom_sdk.exceptions import MetricsServiceError

logger = logging.getLogger(__name__)

CHECK_PROFILE_DUMP = "profile.session"
CHECK_RESTRICTED = "profile.restricted"
CHECK_UNRESTRICTED = "profile.all"


class ProfileFetchVerifier:
    def __init__(
        self,
        service: MetricsServiceProtocol,
        catalog: ResolvedCatalog,
        check_log: Optional[CheckLog] = None,
    ):
        self.service = service
        self.catalog = catalog
        self.indom = catalog.indom
        self.check_log = check_log or CheckLog()

    def set_profile(self, instances: Iterable[int]) -> Profile:
        """Replace the session profile for the domain with exactly ``instances``."""
        profile = Profile(indom=self.indom, instances=frozenset(instances))
        try:
            self.service.delete_profile(self.indom)
            self.service.add_profile(self.indom, sorted(profile.instances))
        except MetricsServiceError as e:
            raise FetchError(f"cannot set profile on indom {self.indom}: {e}", check="profile.set") from e
        return profile

    def _fetch(self, check: str, context: str) -> FetchResult:
        try:
            result = self.service.fetch(self.catalog.pmids)
        except MetricsServiceError as e:
            raise FetchError(f"{context}: {e}", check=check) from e

        for value_set in result.values:
            if value_set.status < 0:
                raise FetchError(
                    f"{context}: metric <{self.catalog.name_of(value_set.pmid)}> failed with status {value_set.status}",
                    check=check,
                )
        return result

    def _dump_profile(self, expected: Profile) -> None:
        try:
            profile = self.service.describe_profile(self.indom)
        except MetricsServiceError as e:
            self.check_log.warn(CHECK_PROFILE_DUMP, f"cannot describe session profile: {e}")
            return
        shown = "all" if profile.is_all else sorted(profile.instances)
        logger.info(f"  session profile indom={self.indom} instances={shown}")
        if profile.instances != expected.instances:
            self.check_log.warn(
                CHECK_PROFILE_DUMP, "session profile differs from the one set", expected=sorted(expected.instances)
            )
        else:
            self.check_log.passed(CHECK_PROFILE_DUMP, instances=sorted(expected.instances))

    def verify_restricted(self, own_pid: int, parent_pid: int, iterations: int = 1) -> None:
        """
        Fetch with profile = {own_pid, parent_pid}.

        A count other than 2 is only a warning (either process may be missing
        for unrelated reasons); an instance outside the pair is a violation.
        """
        profile = self.set_profile([own_pid, parent_pid])
        allowed: List[int] = [own_pid, parent_pid]
        self._dump_profile(profile)

        for iteration in range(iterations):
            result = self._fetch(CHECK_RESTRICTED, f"iteration {iteration}")
            for value_set in result.values:
                metric = self.catalog.name_of(value_set.pmid)
                if value_set.numval != 2:
                    self.check_log.warn(
                        CHECK_RESTRICTED, f"num of inst == {value_set.numval}", metric=metric, iteration=iteration
                    )
                for inst in value_set.instance_ids():
                    if not profile.covers(inst):
                        raise ProfileViolation(metric, inst, allowed)
        self.check_log.passed(CHECK_RESTRICTED, iterations=iterations, allowed=allowed)

    def verify_unrestricted(self, snapshot: InstanceDomainSnapshot) -> FetchResult:
        """Fetch with profile = every snapshot instance; the fetch must succeed."""
        profile = self.set_profile(snapshot.ids())
        count = len(profile.instances or ())
        result = self._fetch(CHECK_UNRESTRICTED, f"fetch all {count} instances")
        self.check_log.passed(CHECK_UNRESTRICTED, instances=count, metrics=len(result.values))
        return result
