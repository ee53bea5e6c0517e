"""
Derive how process instance names encode their numeric id.

Scans the process filesystem once. If every numeric entry has the same number
of digits the platform uses fixed-width zero-padded names; any disagreement
means variable-width decimal (the Linux way).
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from procdom.logic.errors import PreconditionError
from procdom.schemas.metrics import NameFormat

logger = logging.getLogger(__name__)

DEFAULT_PROCFS_ROOT = Path("/proc")


def derive_name_format(procfs_root: Union[str, Path] = DEFAULT_PROCFS_ROOT) -> NameFormat:
    """
    Derive the NameFormat from a directory of numeric-named entries.

    Args:
        procfs_root: Directory to enumerate (default /proc)

    Returns:
        NameFormat.fixed_width(n) or NameFormat.variable()

    Raises:
        PreconditionError: if the directory cannot be read or holds no numeric entries
    """
    root = Path(procfs_root)
    if not os.access(root, os.R_OK):
        raise PreconditionError(f"No {root} pseudo filesystem on this platform")

    entry_len: Optional[int] = None
    seen = 0
    try:
        with os.scandir(root) as entries:
            for entry in entries:
                if not entry.name[:1].isdigit():
                    continue
                seen += 1
                if entry_len is None:
                    entry_len = len(entry.name)
                elif len(entry.name) != entry_len:
                    logger.debug(f"{root}: entry {entry.name!r} differs from width {entry_len}, variable width")
                    return NameFormat.variable()
    except OSError as e:
        raise PreconditionError(f"Cannot enumerate {root}: {e}") from e

    if entry_len is None:
        raise PreconditionError(f"No numeric entries found in {root}")

    logger.debug(f"{root}: {seen} entries all {entry_len} digits wide")
    return NameFormat.fixed_width(entry_len)
