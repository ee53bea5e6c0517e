"""Package constants."""

PROCDOM_VERSION = "0.3.0"
