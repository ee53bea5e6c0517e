"""Environment variable helpers."""

import os
from typing import Optional


def get_env_var(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return the environment variable, treating empty strings as unset."""
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def get_env_bool(name: str, default: bool = False) -> bool:
    value = get_env_var(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def get_env_int(name: str, default: int) -> int:
    value = get_env_var(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def get_env_float(name: str) -> Optional[float]:
    value = get_env_var(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")
