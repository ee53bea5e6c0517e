"""Capture every instance of a domain in one round trip."""

import logging

from procdom.logic.errors import SnapshotError
from procdom.protocols.metrics_service import MetricsServiceProtocol
from procdom.schemas.metrics import InstanceDomainSnapshot
from procdom_sdk.exceptions import MetricsServiceError

logger = logging.getLogger(__name__)


def take_snapshot(service: MetricsServiceProtocol, indom: str, verbose: bool = False) -> InstanceDomainSnapshot:
    """
    Enumerate the instance domain. No retry: any failure is fatal.

    The result may be empty when the domain has no live instances.
    """
    try:
        instances = service.get_indom(indom)
    except MetricsServiceError as e:
        raise SnapshotError(f"cannot enumerate indom {indom}: {e}") from e

    snapshot = InstanceDomainSnapshot(indom=indom, instances=tuple(instances))
    if verbose:
        for inst in snapshot.instances:
            logger.info(f'  instance map [{inst.id} "{inst.name}"]')
    logger.debug(f"Snapshot of indom {indom}: {len(snapshot)} instances")
    return snapshot
