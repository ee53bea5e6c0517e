import json
import logging
from datetime import datetime, timezone

from procdom.logic.check_log import CheckLog, save_report
from procdom.schemas.results import CheckOutcome, RunReport


class TestCheckLog:
    def test_records_in_order_with_outcomes(self):
        check_log = CheckLog()
        check_log.passed("pmns", metrics=3)
        check_log.warn("profile.restricted", "num of inst == 1", metric="proc.psinfo.pid")
        check_log.skipped("store", "not supported")

        assert check_log.outcomes() == [CheckOutcome.PASS, CheckOutcome.WARN, CheckOutcome.SKIP]
        assert check_log.outcomes("store") == [CheckOutcome.SKIP]
        assert not check_log.has_failures

        check_log.failed("store", "store succeeded")
        assert check_log.has_failures

    def test_log_line_names_check_and_outcome(self, caplog):
        check_log = CheckLog()
        with caplog.at_level(logging.INFO, logger="procdom.checks"):
            check_log.passed("instance.format", checked=4, fmt="FixedWidth(5)")
            check_log.failed("instance.id_to_name", "name is wrong", id=7)

        assert "check=instance.format outcome=pass checked=4 fmt=FixedWidth(5)" in caplog.text
        assert "check=instance.id_to_name outcome=fail id=7 detail='name is wrong'" in caplog.text
        assert [r.levelno for r in caplog.records] == [logging.INFO, logging.ERROR]

    def test_warn_logged_at_warning_level(self, caplog):
        with caplog.at_level(logging.INFO, logger="procdom.checks"):
            CheckLog().warn("profile.session", "differs")
        assert caplog.records[0].levelno == logging.WARNING


def test_save_report_writes_json(tmp_path):
    check_log = CheckLog()
    check_log.passed("precondition", fmt="Variable")
    check_log.warn("instance.name_to_id", "probe still known", probe_pid=55)
    report = RunReport(
        passed=True,
        metrics=["proc.psinfo.pid"],
        pid=10,
        ppid=1,
        records=check_log.records,
        started_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    path = tmp_path / "nested" / "report.json"

    save_report(report, path)

    data = json.loads(path.read_text())
    assert data["passed"] is True
    assert data["records"][1]["outcome"] == "warn"
    assert data["records"][1]["details"] == {"probe_pid": 55}
    assert report.warnings == 1
