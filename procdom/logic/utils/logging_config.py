"""
Logging setup for verifier runs.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from procdom.logic.config.env_utils import get_env_var

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_basic_logging(
    level: int = logging.INFO,
    logger_instance: Optional[logging.Logger] = None,
    prefix: Optional[str] = None,
    console_output: bool = True,
    log_to_file: bool = False,
    log_dir: str = "logs",
) -> Optional[Path]:
    """
    Configure console and optional file logging.

    PROCDOM_LOG_LEVEL, when set to a level name, overrides ``level``.

    Returns:
        Path of the log file when file logging is enabled, else None
    """
    env_level = get_env_var("PROCDOM_LOG_LEVEL")
    if env_level:
        level = getattr(logging, env_level.upper(), level)

    target = logger_instance or logging.getLogger()
    for handler in target.handlers[:]:
        target.removeHandler(handler)
    target.setLevel(level)

    fmt = f"{prefix} {DEFAULT_FORMAT}" if prefix else DEFAULT_FORMAT
    formatter = logging.Formatter(fmt)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        target.addHandler(console_handler)

    log_file: Optional[Path] = None
    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / f"procdom_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        target.addHandler(file_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return log_file
