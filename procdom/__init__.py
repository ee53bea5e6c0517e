"""
procdom - conformance verifier for process instance domains served by a
remote metrics service.
"""

from procdom.constants import PROCDOM_VERSION

__version__ = PROCDOM_VERSION
