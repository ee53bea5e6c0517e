"""
Verification driver.

Runs the checks in order on a single thread:

    resolve -> snapshot (probe spawned first) -> consistency (after probe exit)
    -> profile/fetch -> store rejection

The first violation aborts the run. The probe is reaped on every exit path;
the remote session belongs to the caller, who closes it.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

import psutil

from procdom.logic.catalog import MetricCatalogResolver, ResolvedCatalog
from procdom.logic.check_log import CheckLog, save_report
from procdom.logic.config import VerifierConfig
from procdom.logic.consistency import ConsistencyChecker
from procdom.logic.errors import VerificationError
from procdom.logic.name_format import derive_name_format
from procdom.logic.probe import ProbeLifecycle, probe_duration
from procdom.logic.profile_fetch import ProfileFetchVerifier
from procdom.logic.snapshot import take_snapshot
from procdom.logic.write_rejection import WriteRejectionChecker
from procdom.protocols.metrics_service import MetricsServiceProtocol
from procdom.schemas.metrics import InstanceDomainSnapshot, NameFormat
from procdom.schemas.results import RunReport

logger = logging.getLogger(__name__)


class ConformanceVerifier:
    """Drives one complete verification run against a metrics service session."""

    def __init__(
        self,
        service: MetricsServiceProtocol,
        config: VerifierConfig,
        check_log: Optional[CheckLog] = None,
        probe_factory: Callable[[float], ProbeLifecycle] = ProbeLifecycle,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.service = service
        self.config = config
        self.check_log = check_log or CheckLog()
        self.probe_factory = probe_factory
        self.sleep = sleep

        process = psutil.Process()
        self.pid = process.pid
        self.ppid = process.ppid()

        self.name_format: Optional[NameFormat] = None
        self.catalog: Optional[ResolvedCatalog] = None
        self.snapshot: Optional[InstanceDomainSnapshot] = None
        self.probe_pid: Optional[int] = None
        self.report: Optional[RunReport] = None

    def run(self) -> RunReport:
        """
        Run every check.

        Returns:
            The passing RunReport

        Raises:
            VerificationError: on the first violation, after recording it

        Any other exception also ends the run; the report is then marked as
        not passed before the exception propagates.
        """
        started_at = datetime.now(timezone.utc)
        logger.info(f"pid={self.pid} ppid={self.ppid}")
        passed = False
        failure: Optional[str] = None
        try:
            self._run_checks()
            passed = True
        except VerificationError as e:
            failure = f"{e.check}: {e.message}"
            self.check_log.failed(e.check, e.message, **e.details())
            raise
        except Exception as e:
            failure = f"{type(e).__name__}: {e}"
            logger.error(f"Verification aborted by unexpected error: {failure}")
            raise
        finally:
            self.report = self._build_report(started_at, passed, failure)
            if self.config.json_report is not None:
                save_report(self.report, self.config.json_report)
        return self.report

    def _run_checks(self) -> None:
        self.name_format = derive_name_format(self.config.procfs_root)
        self.check_log.passed("precondition", fmt=self.name_format.describe())

        logger.info("--- desc ---")
        self.catalog = MetricCatalogResolver(self.service).resolve(self.config.metrics)
        self.check_log.passed("pmns", metrics=len(self.catalog.pmids))
        self.check_log.passed("desc", indom=self.catalog.indom)

        logger.info("--- instance ---")
        with self.probe_factory(probe_duration(self.config.refresh)) as probe:
            self.probe_pid = probe.pid
            if self.config.settle_before_snapshot:
                # let the service pick up the probe in its active list
                self.sleep(2 * self.config.refresh)
            self.snapshot = take_snapshot(self.service, self.catalog.indom, verbose=self.config.verbose)
            self.check_log.passed("instance.enumerate", instances=len(self.snapshot), probe_pid=self.probe_pid)

            checker = ConsistencyChecker(
                self.service,
                self.name_format,
                probe_pid=self.probe_pid,
                check_log=self.check_log,
                verbose=self.config.verbose,
            )
            checker.run(self.snapshot, wait_for_probe=probe.wait)

        logger.info("--- profile/fetch ---")
        fetcher = ProfileFetchVerifier(self.service, self.catalog, check_log=self.check_log)
        fetcher.verify_restricted(self.pid, self.ppid, iterations=self.config.iterations)
        fetcher.verify_unrestricted(self.snapshot)

        logger.info("--- store ---")
        store_checker = WriteRejectionChecker(self.service, self.catalog.pmids, check_log=self.check_log)
        if self.config.supports_store:
            store_checker.check()
        else:
            store_checker.skip("metric family does not support store")

    def _build_report(self, started_at: datetime, passed: bool, failure: Optional[str]) -> RunReport:
        if not passed and failure is None:
            failure = "run aborted"
        return RunReport(
            passed=passed,
            metrics=list(self.config.metrics),
            pid=self.pid,
            ppid=self.ppid,
            probe_pid=self.probe_pid,
            name_format=self.name_format.describe() if self.name_format else None,
            failure=failure,
            records=list(self.check_log.records),
            started_at=started_at,
        )
