from enum import Enum


class Lifecycle(str, Enum):
    """How long an object built by a construction rule lives."""

    TRANSIENT = "transient"
    """Rebuilt on every resolution."""

    SINGLETON = "singleton"
    """Built once per (declaring type, mode) and reused."""
