"""
Schemas for metrics, instance domains, profiles and fetch results.

All models are immutable once built: descriptors, snapshots and fetch
results are observations of the remote service, never edited locally.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

_LEADING_NUMBER = re.compile(r"\s*([+-]?\d+)")


class MetricDescriptor(BaseModel):
    """Descriptor of a resolved metric."""

    name: str = Field(..., description="Metric name as requested")
    pmid: str = Field(..., description="Opaque metric identifier")
    indom: Optional[str] = Field(None, description="Instance domain identifier, None for singular metrics")
    type: str = Field("unknown", description="Value type reported by the service")
    semantics: str = Field("unknown", description="Counter, instant or discrete")
    units: str = Field("", description="Units string")

    model_config = ConfigDict(frozen=True, extra="ignore")


class NameFormat(BaseModel):
    """How an instance name encodes its numeric id.

    ``width`` set means fixed-width zero-padded decimal (e.g. ``00100``);
    ``width`` None means variable-width decimal (e.g. ``100``).
    """

    width: Optional[int] = Field(None, ge=1, description="Digit count for fixed-width names")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def fixed_width(cls, width: int) -> "NameFormat":
        return cls(width=width)

    @classmethod
    def variable(cls) -> "NameFormat":
        return cls(width=None)

    @property
    def is_fixed(self) -> bool:
        return self.width is not None

    def format_id(self, inst: int) -> str:
        if not self.is_fixed:
            return str(inst)
        return str(inst).zfill(self.width)

    def decode(self, name: str) -> int:
        """Decode the leading number of an instance name.

        A fixed-width format reads at most ``width`` characters, a sign
        included. Raises ValueError when the name does not start with a number.
        """
        if self.width is None:
            match = _LEADING_NUMBER.match(name)
        elif self.width == 1:
            match = re.match(r"\s*(\d)", name)
        else:
            match = re.match(r"\s*([+-]\d{1,%d}|\d{1,%d})" % (self.width - 1, self.width), name)
        if match is None:
            raise ValueError(f"cannot get id from instance name {name!r}")
        return int(match.group(1))

    def name_matches(self, name: str, inst: int) -> bool:
        """Check that ``name`` starts with the encoding of ``inst``.

        The encoded id may be followed only by end of string or whitespace.
        If the formatted prefix does not match, leading zeros are stripped
        from the name and the plain decimal id is tried instead.
        """
        if _prefix_matches(name, self.format_id(inst)):
            return True
        return _prefix_matches(name.lstrip("0"), str(inst))

    def describe(self) -> str:
        return f"FixedWidth({self.width})" if self.is_fixed else "Variable"


def _prefix_matches(name: str, prefix: str) -> bool:
    if not name.startswith(prefix):
        return False
    rest = name[len(prefix) :]
    return rest == "" or rest[0].isspace()


class Instance(BaseModel):
    """One member of an instance domain."""

    id: int
    name: str

    model_config = ConfigDict(frozen=True)


class InstanceDomainSnapshot(BaseModel):
    """All instances of a domain captured at one moment. May be stale by the time it is used."""

    indom: str
    instances: Tuple[Instance, ...] = ()
    taken_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)

    def ids(self) -> List[int]:
        return [inst.id for inst in self.instances]

    def __len__(self) -> int:
        return len(self.instances)


class Profile(BaseModel):
    """Server-side instance filter; ``instances`` None selects every instance."""

    indom: str
    instances: Optional[FrozenSet[int]] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_all(self) -> bool:
        return self.instances is None

    def covers(self, inst: int) -> bool:
        return self.instances is None or inst in self.instances


class InstanceValue(BaseModel):
    instance: int
    value: Any = None

    model_config = ConfigDict(frozen=True)


class MetricValueSet(BaseModel):
    """Values returned for one metric in a fetch."""

    pmid: str
    status: int = Field(0, description="Per-metric status, negative on error")
    instances: List[InstanceValue] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def numval(self) -> int:
        return len(self.instances)

    def instance_ids(self) -> List[int]:
        return [v.instance for v in self.instances]


class FetchResult(BaseModel):
    """Result of one fetch; transient and discarded after inspection."""

    timestamp: Optional[datetime] = None
    values: List[MetricValueSet] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
