"""
Disposable probe process.

The probe is a child that sleeps for a fixed duration and exits on its own.
Its pid is recorded before the instance snapshot is used, and the verifier
blocks on its exit before doing any instance lookups, so by lookup time it is
the one instance known for certain to be dead.
"""

import logging
import subprocess
import sys
from typing import List, Optional

logger = logging.getLogger(__name__)


def probe_duration(refresh: int) -> float:
    """Sleep long enough to span at least two service refresh intervals."""
    return float(2 * refresh + 1)


class ProbeLifecycle:
    """Owns one short-lived child process."""

    def __init__(self, duration: float):
        self.duration = duration
        self.process: Optional[subprocess.Popen] = None
        self.returncode: Optional[int] = None

    def __enter__(self) -> "ProbeLifecycle":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def _command(self) -> List[str]:
        return [sys.executable, "-c", f"import time; time.sleep({self.duration!r})"]

    @property
    def pid(self) -> int:
        if self.process is None:
            raise RuntimeError("Probe has not been started")
        return self.process.pid

    @property
    def exited(self) -> bool:
        return self.returncode is not None

    def start(self) -> int:
        """Spawn the probe and return its pid."""
        if self.process is not None:
            raise RuntimeError("Probe already started")
        self.process = subprocess.Popen(
            self._command(), stdin=subprocess.DEVNULL, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
        )
        logger.info(f"cpid={self.process.pid}")
        return self.process.pid

    def wait(self) -> int:
        """Block until the probe has exited. No timeout."""
        if self.process is None:
            raise RuntimeError("Probe has not been started")
        if self.returncode is None:
            self.returncode = self.process.wait()
            logger.debug(f"Probe {self.process.pid} exited with {self.returncode}")
        return self.returncode

    def cleanup(self) -> None:
        """Kill and reap the probe if a run aborted before waiting on it."""
        if self.process is None or self.returncode is not None:
            return
        if self.process.poll() is None:
            logger.debug(f"Killing probe {self.process.pid}")
            self.process.kill()
        self.returncode = self.process.wait()
