"""
Instance id / name consistency checks.

Three passes over a snapshot, each failing fast:

- format: every snapshot name decodes to its own id under the NameFormat
- name -> id: server lookup by name returns the snapshot id
- id -> name: server lookup by id returns a name encoding that id

Instances may have exited since the snapshot was taken, so "instance not
found" is tolerated in the lookup passes. The probe process is the only
instance known to be dead; for it "not found" is the expected outcome and any
other error is a violation.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from procdom.logic.check_log import CheckLog
from procdom.logic.errors import ConsistencyViolation
from procdom.protocols.metrics_service import MetricsServiceProtocol
from procdom.schemas.metrics import InstanceDomainSnapshot, NameFormat
from procdom_sdk.exceptions import InstanceNotFoundError, MetricsServiceError

logger = logging.getLogger(__name__)

CHECK_FORMAT = "instance.format"
CHECK_NAME_LOOKUP = "instance.name_to_id"
CHECK_ID_LOOKUP = "instance.id_to_name"


@dataclass
class PassSummary:
    """Counts for one pass."""

    checked: int = 0
    vanished: int = 0
    probe_seen_dead: bool = False
    probe_seen_alive: bool = False


class ConsistencyChecker:
    """Validates id <-> name round trips over one snapshot."""

    def __init__(
        self,
        service: MetricsServiceProtocol,
        name_format: NameFormat,
        probe_pid: Optional[int] = None,
        check_log: Optional[CheckLog] = None,
        verbose: bool = False,
    ):
        self.service = service
        self.name_format = name_format
        self.probe_pid = probe_pid
        self.check_log = check_log or CheckLog()
        self.verbose = verbose

    def check_format(self, snapshot: InstanceDomainSnapshot) -> PassSummary:
        summary = PassSummary()
        for inst in snapshot.instances:
            try:
                decoded = self.name_format.decode(inst.name)
            except ValueError as e:
                raise ConsistencyViolation(
                    inst.id, inst.name, "cannot get id from instance name", check=CHECK_FORMAT
                ) from e
            if decoded != inst.id:
                raise ConsistencyViolation(
                    inst.id,
                    inst.name,
                    f"instance name is wrong, decodes to {decoded} (fmt={self.name_format.describe()})",
                    check=CHECK_FORMAT,
                )
            summary.checked += 1
        self.check_log.passed(CHECK_FORMAT, checked=summary.checked, fmt=self.name_format.describe())
        return summary

    def _not_found(self, inst_id: int, check: str, summary: PassSummary) -> None:
        summary.vanished += 1
        if inst_id == self.probe_pid:
            summary.probe_seen_dead = True
            logger.info(f"  Death of child detected, pid={inst_id}")
        else:
            logger.debug(f"  Instance {inst_id} vanished before {check}")

    def _probe_alive(self, check: str, summary: PassSummary) -> None:
        # Accepted: the service may not have refreshed since the probe exited.
        summary.probe_seen_alive = True
        self.check_log.warn(check, "probe instance still known after it exited", probe_pid=self.probe_pid)

    def check_name_lookups(self, snapshot: InstanceDomainSnapshot) -> PassSummary:
        summary = PassSummary()
        for inst in snapshot.instances:
            try:
                found = self.service.lookup_instance(snapshot.indom, inst.name)
            except InstanceNotFoundError:
                self._not_found(inst.id, CHECK_NAME_LOOKUP, summary)
                continue
            except MetricsServiceError as e:
                raise ConsistencyViolation(
                    inst.id, inst.name, f"name lookup failed: {e}", check=CHECK_NAME_LOOKUP
                ) from e

            if self.verbose:
                logger.info(f'  instance lookup "{inst.name}" --> {found}')
            if found != inst.id:
                raise ConsistencyViolation(
                    inst.id, inst.name, f"inst is wrong, expected {inst.id} got {found}", check=CHECK_NAME_LOOKUP
                )
            if inst.id == self.probe_pid:
                self._probe_alive(CHECK_NAME_LOOKUP, summary)
            summary.checked += 1

        self.check_log.passed(
            CHECK_NAME_LOOKUP, checked=summary.checked, vanished=summary.vanished, probe_dead=summary.probe_seen_dead
        )
        return summary

    def check_id_lookups(self, snapshot: InstanceDomainSnapshot) -> PassSummary:
        summary = PassSummary()
        for inst in snapshot.instances:
            try:
                name = self.service.instance_name(snapshot.indom, inst.id)
            except InstanceNotFoundError:
                self._not_found(inst.id, CHECK_ID_LOOKUP, summary)
                continue
            except MetricsServiceError as e:
                raise ConsistencyViolation(
                    inst.id, inst.name, f"id lookup failed: {e}", check=CHECK_ID_LOOKUP
                ) from e

            if self.verbose:
                logger.info(f'  instance name {inst.id} --> "{name}"')
            if not self.name_format.name_matches(name, inst.id):
                raise ConsistencyViolation(
                    inst.id,
                    name,
                    f"name is wrong, expected {self.name_format.format_id(inst.id)!r}",
                    check=CHECK_ID_LOOKUP,
                )
            if inst.id == self.probe_pid:
                self._probe_alive(CHECK_ID_LOOKUP, summary)
            summary.checked += 1

        self.check_log.passed(
            CHECK_ID_LOOKUP, checked=summary.checked, vanished=summary.vanished, probe_dead=summary.probe_seen_dead
        )
        return summary

    def run(self, snapshot: InstanceDomainSnapshot, wait_for_probe: Optional[Callable[[], object]] = None) -> None:
        """Format pass, then the probe barrier, then both lookup passes."""
        self.check_format(snapshot)
        if wait_for_probe is not None:
            # Lookups must not start until the probe is known to be dead.
            wait_for_probe()
        self.check_name_lookups(snapshot)
        self.check_id_lookups(snapshot)
