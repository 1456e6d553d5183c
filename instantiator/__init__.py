"""
Mode-driven construction: obtain an object satisfying a contract while the
concrete implementation is picked at runtime by a mode ("default", "test", ...).
"""

from instantiator.shared.context import InstantiatorContext, get_context, override_global, reset_context, set_context
from instantiator.shared.errors import (
    InstantiatorError,
    InvalidRegistration,
    ModeNotRegistered,
    RegistrationConflict,
    StartupValidationError,
)
from instantiator.shared.instantiator import Instantiator, define_instantiator
from instantiator.shared.lifecycle import Lifecycle
from instantiator.shared.registry import FactoryRegistry
from instantiator.shared.state import DEFAULT_MODE, GlobalState
from instantiator.shared.validation import RuleArguments, ValidationReport, validate_modes

__all__ = [
    "DEFAULT_MODE",
    "FactoryRegistry",
    "GlobalState",
    "Instantiator",
    "InstantiatorContext",
    "InstantiatorError",
    "InvalidRegistration",
    "Lifecycle",
    "ModeNotRegistered",
    "RegistrationConflict",
    "RuleArguments",
    "StartupValidationError",
    "ValidationReport",
    "define_instantiator",
    "get_context",
    "override_global",
    "reset_context",
    "set_context",
    "validate_modes",
]
