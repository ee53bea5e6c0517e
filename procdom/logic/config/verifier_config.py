"""
Verifier configuration and metric family rules.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .env_utils import get_env_bool, get_env_float, get_env_int, get_env_var

DEFAULT_BASE_URL = "http://localhost:44322"


class MetricFamily(Enum):
    """Metric families served by the process agents."""

    PROC = "proc"
    HOTPROC = "hotproc"

    @property
    def supports_store(self) -> bool:
        return self is MetricFamily.PROC

    @property
    def settles_before_snapshot(self) -> bool:
        # hotproc only lists processes after its active list has been refreshed
        return self is MetricFamily.HOTPROC


class MetricFamilyError(ValueError):
    """Raised when requested metrics do not all come from one supported family."""


def detect_family(metrics: Sequence[str]) -> MetricFamily:
    """Return the single family shared by ``metrics``."""
    if not metrics:
        raise MetricFamilyError("at least one metric is required")

    family: Optional[MetricFamily] = None
    for metric in metrics:
        current = next((f for f in MetricFamily if metric.startswith(f"{f.value}.")), None)
        if current is None:
            raise MetricFamilyError(f"all metrics should be from proc or hotproc agent: {metric}")
        if family is not None and current is not family:
            raise MetricFamilyError("all metrics should be from same agent")
        family = current
    assert family is not None
    return family


@dataclass
class VerifierConfig:
    """Configuration for one verification run."""

    metrics: List[str] = field(default_factory=list)

    # Service
    base_url: str = DEFAULT_BASE_URL
    host: str = "localhost"
    request_timeout: Optional[float] = None  # None blocks indefinitely

    # Run shape
    iterations: int = 1
    refresh: int = 1
    supports_store: bool = True
    settle_before_snapshot: bool = False

    # Process enumeration source for the name format
    procfs_root: Path = Path("/proc")

    # Output
    verbose: bool = False
    json_report: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError("iterations must be at least 1")
        if self.refresh < 0:
            raise ValueError("refresh must not be negative")

    def apply_family(self, family: MetricFamily) -> None:
        self.supports_store = family.supports_store
        self.settle_before_snapshot = family.settles_before_snapshot

    @classmethod
    def from_env(cls, **overrides) -> "VerifierConfig":
        """Build a config from PROCDOM_* variables; explicit overrides win."""
        values = {
            "base_url": get_env_var("PROCDOM_URL", DEFAULT_BASE_URL),
            "host": get_env_var("PROCDOM_HOST", "localhost"),
            "request_timeout": get_env_float("PROCDOM_REQUEST_TIMEOUT"),
            "iterations": get_env_int("PROCDOM_ITERATIONS", 1),
            "refresh": get_env_int("PROCDOM_REFRESH", 1),
            "procfs_root": Path(get_env_var("PROCDOM_PROCFS_ROOT", "/proc") or "/proc"),
            "verbose": get_env_bool("PROCDOM_VERBOSE"),
        }
        report = get_env_var("PROCDOM_JSON_REPORT")
        if report:
            values["json_report"] = Path(report)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
