"""
Per-declaring-type registry of construction rules.

A FactoryRegistry maps a mode to a (rule, lifecycle) pair and keeps the objects
built by singleton rules. All writes go through one re-entrant lock; resolving a
transient rule or an already cached singleton takes no lock.
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from instantiator.shared.errors import InvalidRegistration, ModeNotRegistered, RegistrationConflict
from instantiator.shared.lifecycle import Lifecycle
from instantiator.shared.logger import create_logger
from instantiator.shared.state import DEFAULT_MODE

Rule = Callable[..., Any]


class FactoryRegistry:
    """Construction rules and singleton cache for one declaring type."""

    def __init__(self, type_tag: str, strict: bool = False, logger=None):
        self.type_tag = type_tag
        self.strict = strict
        self.logger = logger or create_logger("FactoryRegistry")
        self._rules: Dict[str, Tuple[Rule, Lifecycle]] = {}
        self._singletons: Dict[str, Any] = {}
        self._lock = threading.RLock()
        self._populated = False
        self._registering_thread: Optional[int] = None

    # ----------------------------
    # Registration
    # ----------------------------
    def register(self, mode: str, rule: Rule, lifecycle: Lifecycle = Lifecycle.TRANSIENT) -> None:
        """Insert or overwrite the rule for `mode`."""
        if not isinstance(mode, str) or not mode:
            raise InvalidRegistration(f"Mode must be a non-empty string, got {mode!r} on '{self.type_tag}'")
        if not callable(rule):
            raise InvalidRegistration(f"Rule for mode '{mode}' on '{self.type_tag}' is not callable")
        try:
            lifecycle = Lifecycle(lifecycle)
        except ValueError:
            raise InvalidRegistration(f"Unknown lifecycle {lifecycle!r} for mode '{mode}' on '{self.type_tag}'") from None

        with self._lock:
            if mode in self._rules:
                if self.strict:
                    raise RegistrationConflict(self.type_tag, mode)
                self.logger.warning(
                    "Overwriting construction rule",
                    type_tag=self.type_tag,
                    mode=mode,
                    lifecycle=lifecycle.value,
                )
                # a replaced rule must never hand back an object built by the old one
                self._singletons.pop(mode, None)
            self._rules[mode] = (rule, lifecycle)

    def populate(self, registration: Callable[[], None]) -> bool:
        """
        Run `registration` once for the lifetime of this registry.

        Returns True when this call ran it. If `registration` raises, every rule it
        added is discarded, the registry stays unpopulated and the error propagates.
        A call made from inside `registration` itself returns False without running it.
        """
        if self._populated or self.is_registering:
            return False

        with self._lock:
            if self._populated:
                return False

            self._registering_thread = threading.get_ident()
            try:
                registration()
            except Exception as exc:
                self._rules.clear()
                self._singletons.clear()
                self.logger.error(
                    "Registration failed",
                    type_tag=self.type_tag,
                    error=f"{type(exc).__name__}: {exc}",
                )
                raise
            finally:
                self._registering_thread = None

            self._populated = True

        self.logger.info("Registry populated", type_tag=self.type_tag, modes=self.modes())
        return True

    @property
    def is_populated(self) -> bool:
        return self._populated

    @property
    def is_registering(self) -> bool:
        """True only on the thread currently running the registration step."""
        return self._registering_thread == threading.get_ident()

    # ----------------------------
    # Resolution
    # ----------------------------
    def lookup(self, mode: str, fallback: bool) -> Optional[str]:
        """Mode whose rule would serve `mode`, or None. Builds nothing."""
        if mode in self._rules:
            return mode
        if fallback and mode != DEFAULT_MODE and DEFAULT_MODE in self._rules:
            return DEFAULT_MODE
        return None

    def resolve(self, mode: str, fallback: bool, *args, **kwargs) -> Any:
        """Return an object for `mode`, falling back to "default" when allowed."""
        resolved = self.lookup(mode, fallback)
        if resolved is None:
            self.logger.warning("Mode not registered", type_tag=self.type_tag, mode=mode, fallback=fallback)
            raise ModeNotRegistered(self.type_tag, mode, self._rules.keys())
        if resolved != mode:
            self.logger.debug("Falling back to default mode", type_tag=self.type_tag, mode=mode)

        rule, lifecycle = self._rules[resolved]
        if lifecycle is Lifecycle.TRANSIENT:
            return rule(*args, **kwargs)
        return self._get_singleton(resolved, *args, **kwargs)

    def _get_singleton(self, mode: str, *args, **kwargs) -> Any:
        try:
            return self._singletons[mode]
        except KeyError:
            pass

        with self._lock:
            if mode in self._singletons:
                return self._singletons[mode]
            # re-read under the lock, the rule may have been replaced meanwhile
            rule, lifecycle = self._rules[mode]
            instance = rule(*args, **kwargs)
            if lifecycle is Lifecycle.SINGLETON:
                self._singletons[mode] = instance
                self.logger.debug("Singleton built", type_tag=self.type_tag, mode=mode)
            return instance

    # ----------------------------
    # Introspection
    # ----------------------------
    def modes(self) -> List[str]:
        return sorted(self._rules)

    def has_rule(self, mode: str) -> bool:
        return mode in self._rules

    def lifecycle_of(self, mode: str) -> Optional[Lifecycle]:
        entry = self._rules.get(mode)
        return entry[1] if entry else None

    def cached_modes(self) -> List[str]:
        return sorted(self._singletons)

    def clear_cache(self, mode: Optional[str] = None) -> None:
        """Drop cached singletons, for one mode or all of them."""
        with self._lock:
            if mode is None:
                self._singletons.clear()
            else:
                self._singletons.pop(mode, None)

    def __repr__(self):
        return f"{self.__class__.__name__}(type_tag={self.type_tag!r}, modes={self.modes()})"
