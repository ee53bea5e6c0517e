"""
Verification failures.

Every error here is fatal: the first one raised ends the run with a non-zero
exit status. Each carries the name of the check that failed and the specific
metric, instance or value involved.
"""

from typing import Dict, List, Optional, Sequence


class VerificationError(Exception):
    """Base exception for all verification failures."""

    check = "verify"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, object]:
        return {}


class PreconditionError(VerificationError):
    """Raised when the process enumeration source is unavailable; no checks are possible."""

    check = "precondition"


class NameResolutionError(VerificationError):
    """Raised when one or more metric names cannot be resolved."""

    check = "pmns"

    def __init__(self, unknown: Sequence[str], message: Optional[str] = None):
        self.unknown: List[str] = list(unknown)
        super().__init__(message or f"unknown metric names: {', '.join(self.unknown)}")

    def details(self) -> Dict[str, object]:
        return {"unknown": self.unknown}


class DescriptorLookupError(VerificationError):
    """Raised when the batched descriptor lookup fails."""

    check = "desc"


class DescriptorMismatchError(VerificationError):
    """Raised when the resolved metrics do not share one non-null instance domain."""

    check = "desc"

    def __init__(
        self,
        metric: str,
        indom: Optional[str],
        expected_metric: Optional[str] = None,
        expected_indom: Optional[str] = None,
    ):
        self.metric = metric
        self.indom = indom
        self.expected_metric = expected_metric
        self.expected_indom = expected_indom
        if expected_metric is None:
            message = f"metric <{metric}> has a null instance domain"
        else:
            message = (
                f"metric <{metric}> has indom = {indom}, different to metric <{expected_metric}> "
                f"indom = {expected_indom}; all metrics must share one instance domain"
            )
        super().__init__(message)

    def details(self) -> Dict[str, object]:
        return {
            "metric": self.metric,
            "indom": self.indom,
            "expected_metric": self.expected_metric,
            "expected_indom": self.expected_indom,
        }


class SnapshotError(VerificationError):
    """Raised when the instance domain cannot be enumerated."""

    check = "instance.enumerate"


class ConsistencyViolation(VerificationError):
    """Raised when an instance's id and name do not agree."""

    check = "instance"

    def __init__(self, inst: int, name: str, reason: str, check: Optional[str] = None):
        self.inst = inst
        self.name = name
        self.reason = reason
        if check:
            self.check = check
        super().__init__(f"{reason}: <id,name> = <{inst},{name!r}>")

    def details(self) -> Dict[str, object]:
        return {"id": self.inst, "name": self.name}


class ProfileViolation(VerificationError):
    """Raised when a fetch returns an instance outside the active profile."""

    check = "profile.restricted"

    def __init__(self, metric: str, inst: int, allowed: Sequence[int]):
        self.metric = metric
        self.inst = inst
        self.allowed = sorted(allowed)
        super().__init__(f"metric <{metric}> returned instance {inst} outside profile {self.allowed}")

    def details(self) -> Dict[str, object]:
        return {"metric": self.metric, "instance": self.inst, "allowed": self.allowed}


class FetchError(VerificationError):
    """Raised when a fetch required by a check fails."""

    check = "fetch"

    def __init__(self, message: str, check: Optional[str] = None):
        if check:
            self.check = check
        super().__init__(message)


class ExpectedFailureNotRaised(VerificationError):
    """Raised when the write path does not reject a store with a permission-class error."""

    check = "store"

    def __init__(self, message: str, observed: Optional[str] = None):
        self.observed = observed
        super().__init__(message)

    def details(self) -> Dict[str, object]:
        return {"observed": self.observed}
