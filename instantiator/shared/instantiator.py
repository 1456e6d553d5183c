"""
Instantiator base class.

A concrete Instantiator declares which construction rule serves each mode in
its register() hook and exposes get_instance() under a domain-specific name:

    class DatabaseInstantiator(Instantiator[Database], type_tag="database"):
        def register(self):
            self.instance({"default": PostgresDatabase})
            self.singleton({"test": InMemoryDatabase})

        def get_database(self, dsn: str) -> Database:
            return self.get_instance(dsn)

    db = DatabaseInstantiator(mode="test").get_database("sqlite://")
"""

import types
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Mapping, Optional, Type, TypeVar, final

from instantiator.shared.context import InstantiatorContext, get_context
from instantiator.shared.errors import InvalidRegistration
from instantiator.shared.lifecycle import Lifecycle
from instantiator.shared.registry import FactoryRegistry

T = TypeVar("T")


class Instantiator(ABC, Generic[T]):
    """Resolves construction rules for its declaring type under a local mode."""

    _type_tag: str = ""

    def __init_subclass__(cls, type_tag: Optional[str] = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if "get_instance" in cls.__dict__:
            raise TypeError(f"{cls.__name__} cannot override get_instance(); wrap it in a domain accessor instead")
        cls._type_tag = type_tag or f"{cls.__module__}.{cls.__qualname__}"

    def __init__(self, mode: Optional[str] = None, fallback: Optional[bool] = None,
                 *, context: Optional[InstantiatorContext] = None):
        self._context = context or get_context()
        global_mode, global_fallback = self._context.global_state.snapshot()
        self._mode = mode if mode is not None else global_mode
        self._fallback = fallback if fallback is not None else global_fallback
        self._registry = self._context.registry_for(self.type_tag())
        self._registry.populate(self.register)

    @classmethod
    def type_tag(cls) -> str:
        return cls._type_tag

    @property
    def registry(self) -> FactoryRegistry:
        return self._registry

    # ----------------------------
    # Registration hook & helpers
    # ----------------------------
    @abstractmethod
    def register(self) -> None:
        """Map modes to construction rules with instance() and singleton()."""

    def instance(self, rule_map: Mapping[str, Callable[..., T]]) -> None:
        """Register per-call (transient) rules."""
        self._register_all(rule_map, Lifecycle.TRANSIENT)

    def singleton(self, rule_map: Mapping[str, Callable[..., T]]) -> None:
        """Register rules whose first result is cached and reused."""
        self._register_all(rule_map, Lifecycle.SINGLETON)

    def _register_all(self, rule_map: Mapping[str, Callable[..., T]], lifecycle: Lifecycle) -> None:
        if not self._registry.is_registering:
            raise InvalidRegistration(
                f"{lifecycle.value} rules for '{self.type_tag()}' can only be registered from register()"
            )
        for mode, rule in rule_map.items():
            self._registry.register(mode, rule, lifecycle)

    # ----------------------------
    # Resolution
    # ----------------------------
    @final
    def get_instance(self, *args: Any, **kwargs: Any) -> T:
        """Build (or fetch the cached) object for this instance's mode."""
        return self._registry.resolve(self._mode, self._fallback, *args, **kwargs)

    def resolved_mode(self) -> Optional[str]:
        """Mode whose rule get_instance() would use, or None if it would fail."""
        return self._registry.lookup(self._mode, self._fallback)

    # ----------------------------
    # Local state
    # ----------------------------
    def set_mode(self, mode: str) -> None:
        self._mode = mode

    def get_mode(self) -> str:
        return self._mode

    def set_fallback(self, fallback: bool) -> None:
        self._fallback = fallback

    def get_fallback(self) -> bool:
        return self._fallback

    def __repr__(self):
        return f"{self.__class__.__name__}(mode={self._mode!r}, fallback={self._fallback})"


def define_instantiator(type_tag: str, registration: Callable[[Instantiator], None],
                        name: Optional[str] = None) -> Type[Instantiator]:
    """
    Build a concrete Instantiator type from a plain registration function.

    `registration` receives the instantiator being constructed and calls its
    instance()/singleton() helpers, exactly like a register() override would.
    """

    def register(self) -> None:
        registration(self)

    def exec_body(ns):
        ns["register"] = register
        ns["__module__"] = getattr(registration, "__module__", __name__)

    class_name = name or "".join(part.capitalize() for part in type_tag.replace(".", "_").split("_")) + "Instantiator"
    return types.new_class(class_name, (Instantiator,), {"type_tag": type_tag}, exec_body)
