"""
Process-wide default mode and fallback flag.

Instantiators copy these values when they are constructed; changing them later
never reaches an instance that already exists.
"""

import threading
from typing import Optional, Tuple

from instantiator.shared.logger import create_logger

DEFAULT_MODE = "default"


class GlobalState:
    """Mutable (mode, fallback) pair shared by every Instantiator of a context."""

    def __init__(self, mode: str = DEFAULT_MODE, fallback: bool = True, logger=None):
        self._mode = mode
        self._fallback = fallback
        self._lock = threading.Lock()
        self.logger = logger or create_logger("GlobalState")

    def set_global_mode(self, mode: str) -> None:
        with self._lock:
            previous, self._mode = self._mode, mode
        self.logger.info("Global mode changed", previous=previous, mode=mode)

    def get_global_mode(self) -> str:
        return self._mode

    def set_global_fallback(self, fallback: bool) -> None:
        with self._lock:
            previous, self._fallback = self._fallback, fallback
        self.logger.info("Global fallback changed", previous=previous, fallback=fallback)

    def get_global_fallback(self) -> bool:
        return self._fallback

    def snapshot(self) -> Tuple[str, bool]:
        """Read mode and fallback together."""
        with self._lock:
            return self._mode, self._fallback

    def restore(self, mode: Optional[str] = None, fallback: Optional[bool] = None) -> None:
        with self._lock:
            if mode is not None:
                self._mode = mode
            if fallback is not None:
                self._fallback = fallback

    def reset(self) -> None:
        self.restore(DEFAULT_MODE, True)

    def __repr__(self):
        mode, fallback = self.snapshot()
        return f"{self.__class__.__name__}(mode={mode!r}, fallback={fallback})"
