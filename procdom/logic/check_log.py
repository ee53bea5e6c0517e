"""
Structured check log.

Every check performed emits one log line naming the check and its outcome so
runs can be inspected by scripts, and the full record list can be written as
a JSON report at the end of a run.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from procdom.schemas.results import CheckOutcome, CheckRecord, DetailValue, RunReport

logger = logging.getLogger("procdom.checks")

_LEVELS = {
    CheckOutcome.PASS: logging.INFO,
    CheckOutcome.SKIP: logging.INFO,
    CheckOutcome.WARN: logging.WARNING,
    CheckOutcome.FAIL: logging.ERROR,
}


class CheckLog:
    """Collects check records in the order they happen."""

    def __init__(self) -> None:
        self.records: List[CheckRecord] = []

    def record(self, check: str, outcome: CheckOutcome, message: str = "", **details: DetailValue) -> CheckRecord:
        entry = CheckRecord(check=check, outcome=outcome, message=message, details=details)
        self.records.append(entry)
        logger.log(_LEVELS[outcome], entry.to_log_line())
        return entry

    def passed(self, check: str, message: str = "", **details: DetailValue) -> CheckRecord:
        return self.record(check, CheckOutcome.PASS, message, **details)

    def warn(self, check: str, message: str = "", **details: DetailValue) -> CheckRecord:
        return self.record(check, CheckOutcome.WARN, message, **details)

    def failed(self, check: str, message: str = "", **details: DetailValue) -> CheckRecord:
        return self.record(check, CheckOutcome.FAIL, message, **details)

    def skipped(self, check: str, message: str = "", **details: DetailValue) -> CheckRecord:
        return self.record(check, CheckOutcome.SKIP, message, **details)

    def outcomes(self, check: Optional[str] = None) -> List[CheckOutcome]:
        return [r.outcome for r in self.records if check is None or r.check == check]

    @property
    def has_failures(self) -> bool:
        return any(r.outcome == CheckOutcome.FAIL for r in self.records)


def save_report(report: RunReport, path: Path) -> None:
    """Write the run report as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(report.model_dump(mode="json"), f, indent=2)
    logger.debug(f"Wrote report to {path}")
