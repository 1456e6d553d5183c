"""
Holder for a GlobalState and the registries of every declaring type.

Most applications use the process-wide context returned by get_context(); tests
and embedded subsystems can build their own and pass it to Instantiators.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from instantiator.shared.logger import create_logger
from instantiator.shared.registry import FactoryRegistry
from instantiator.shared.state import GlobalState


class InstantiatorContext:
    """Thread-safe map of type tag -> FactoryRegistry."""

    def __init__(self, global_state: Optional[GlobalState] = None, strict_registration: bool = False):
        self.global_state = global_state or GlobalState()
        self.strict_registration = strict_registration
        self.logger = create_logger("InstantiatorContext")
        self._registries: Dict[str, FactoryRegistry] = {}
        self._lock = threading.Lock()

    def registry_for(self, type_tag: str) -> FactoryRegistry:
        """Get or create the registry for a declaring type."""
        registry = self._registries.get(type_tag)
        if registry is not None:
            return registry

        with self._lock:
            if type_tag not in self._registries:
                self._registries[type_tag] = FactoryRegistry(type_tag, strict=self.strict_registration)
                self.logger.debug("Registry created", type_tag=type_tag)
            return self._registries[type_tag]

    def get_registry(self, type_tag: str) -> Optional[FactoryRegistry]:
        return self._registries.get(type_tag)

    def registries(self) -> List[FactoryRegistry]:
        with self._lock:
            return list(self._registries.values())

    def reset(self) -> None:
        """Forget every registry and restore the global defaults."""
        with self._lock:
            self._registries.clear()
        self.global_state.reset()


# Global context
_context: Optional[InstantiatorContext] = None
_context_lock = threading.Lock()


def get_context() -> InstantiatorContext:
    """Get the process-wide context, creating it on first use."""
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                _context = InstantiatorContext()
    return _context


def set_context(context: InstantiatorContext) -> None:
    global _context
    with _context_lock:
        _context = context


def reset_context() -> None:
    global _context
    with _context_lock:
        _context = None


@contextmanager
def override_global(mode: Optional[str] = None, fallback: Optional[bool] = None,
                    context: Optional[InstantiatorContext] = None) -> Iterator[GlobalState]:
    """Temporarily change the global mode and/or fallback."""
    state = (context or get_context()).global_state
    previous_mode, previous_fallback = state.snapshot()
    if mode is not None:
        state.set_global_mode(mode)
    if fallback is not None:
        state.set_global_fallback(fallback)
    try:
        yield state
    finally:
        state.restore(previous_mode, previous_fallback)
