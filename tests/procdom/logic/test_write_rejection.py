"""Tests for the store rejection check."""

from unittest.mock import MagicMock

import pytest

from procdom.logic.check_log import CheckLog
from procdom.logic.errors import ExpectedFailureNotRaised, FetchError
from procdom.logic.write_rejection import CHECK_STORE, WriteRejectionChecker
from procdom.schemas.results import CheckOutcome
from procdom_sdk.exceptions import AccessDeniedError, PermissionDeniedError, TransportError, UnknownMetricError

PMIDS = ["3.8.0", "3.8.1"]


@pytest.mark.parametrize(
    "error",
    [
        AccessDeniedError("EACCES", code="access_denied"),
        PermissionDeniedError("no permission", code="permission"),
    ],
)
def test_permission_class_rejection_passes(fake_service, error):
    fake_service.store_error = error
    check_log = CheckLog()
    WriteRejectionChecker(fake_service, PMIDS, check_log).check()

    assert check_log.outcomes(CHECK_STORE) == [CheckOutcome.PASS]
    assert check_log.records[0].details["observed"] == type(error).__name__
    # the values written back are the ones just fetched
    assert len(fake_service.stored) == 1
    assert [v.pmid for v in fake_service.stored[0].values] == PMIDS


def test_successful_store_is_failure(fake_service):
    fake_service.store_error = None
    with pytest.raises(ExpectedFailureNotRaised) as exc_info:
        WriteRejectionChecker(fake_service, PMIDS, CheckLog()).check()
    assert exc_info.value.observed == "success"


@pytest.mark.parametrize("error", [TransportError("reset"), UnknownMetricError("bad pmid", code="unknown_metric")])
def test_other_error_is_failure(fake_service, error):
    fake_service.store_error = error
    with pytest.raises(ExpectedFailureNotRaised, match="store did not fail correctly") as exc_info:
        WriteRejectionChecker(fake_service, PMIDS, CheckLog()).check()
    assert exc_info.value.observed == type(error).__name__


def test_fetch_failure_is_fatal():
    service = MagicMock()
    service.fetch.side_effect = TransportError("down")
    with pytest.raises(FetchError) as exc_info:
        WriteRejectionChecker(service, PMIDS, CheckLog()).check()
    assert exc_info.value.check == CHECK_STORE
    service.store.assert_not_called()


def test_skip_is_recorded():
    check_log = CheckLog()
    WriteRejectionChecker(MagicMock(), PMIDS, check_log).skip("hotproc metrics cannot be stored")
    assert check_log.outcomes() == [CheckOutcome.SKIP]
    assert check_log.records[0].message == "hotproc metrics cannot be stored"
