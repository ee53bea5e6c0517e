"""Check that writing fetched values back is refused with a permission-class error."""

import logging
from typing import Optional, Sequence

from procdom.logic.check_log import CheckLog
from procdom.logic.errors import ExpectedFailureNotRaised, FetchError
from procdom.protocols.metrics_service import MetricsServiceProtocol
from procdom_sdk.exceptions import AccessDeniedError, MetricsServiceError, PermissionDeniedError

logger = logging.getLogger(__name__)

CHECK_STORE = "store"

ACCEPTED_ERRORS = (AccessDeniedError, PermissionDeniedError)


class WriteRejectionChecker:
    def __init__(self, service: MetricsServiceProtocol, pmids: Sequence[str], check_log: Optional[CheckLog] = None):
        self.service = service
        self.pmids = list(pmids)
        self.check_log = check_log or CheckLog()

    def check(self) -> None:
        try:
            result = self.service.fetch(self.pmids)
        except MetricsServiceError as e:
            raise FetchError(f"fetch failed: {e}", check=CHECK_STORE) from e

        try:
            self.service.store(result)
        except ACCEPTED_ERRORS as e:
            self.check_log.passed(CHECK_STORE, observed=type(e).__name__)
            return
        except MetricsServiceError as e:
            raise ExpectedFailureNotRaised(
                f"store did not fail correctly: expected {AccessDeniedError.__name__} or "
                f"{PermissionDeniedError.__name__}, got {type(e).__name__}: {e}",
                observed=type(e).__name__,
            ) from e

        raise ExpectedFailureNotRaised("store of fetched values succeeded", observed="success")

    def skip(self, reason: str) -> None:
        self.check_log.skipped(CHECK_STORE, reason)
