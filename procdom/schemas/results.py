"""
Schemas for the structured check log and the run report.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

DetailValue = Union[str, int, float, bool, None, List[int], List[str]]


class CheckOutcome(str, Enum):
    """Outcome of a single check."""

    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"
    SKIP = "skip"


class CheckRecord(BaseModel):
    """One line of the check log."""

    check: str = Field(..., description="Name of the check, e.g. instance.format")
    outcome: CheckOutcome
    message: str = ""
    details: Dict[str, DetailValue] = Field(default_factory=dict)
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_log_line(self) -> str:
        parts = [f"check={self.check}", f"outcome={self.outcome.value}"]
        for key, value in self.details.items():
            parts.append(f"{key}={value}")
        if self.message:
            parts.append(f"detail={self.message!r}")
        return " ".join(parts)


class RunReport(BaseModel):
    """Summary of a complete verification run."""

    passed: bool
    metrics: List[str] = Field(default_factory=list)
    pid: int
    ppid: int
    probe_pid: Optional[int] = None
    name_format: Optional[str] = None
    failure: Optional[str] = None
    records: List[CheckRecord] = Field(default_factory=list)
    started_at: datetime
    finished_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def warnings(self) -> int:
        return sum(1 for r in self.records if r.outcome == CheckOutcome.WARN)
