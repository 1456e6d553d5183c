from typing import Iterable, Optional


class InstantiatorError(Exception):
    """Base class for every error raised by the instantiator package."""


class ModeNotRegistered(InstantiatorError, LookupError):
    """No construction rule for the requested mode (and no usable fallback)."""

    def __init__(self, type_tag: str, mode: str, registered: Optional[Iterable[str]] = None):
        self.type_tag = type_tag
        self.mode = mode
        self.registered = sorted(registered or [])
        super().__init__(
            f"No construction rule for mode '{mode}' on '{type_tag}'. "
            f"Registered modes: {self.registered}"
        )


class RegistrationConflict(InstantiatorError):
    """A mode was registered twice while strict registration is enabled."""

    def __init__(self, type_tag: str, mode: str):
        self.type_tag = type_tag
        self.mode = mode
        super().__init__(f"Mode '{mode}' is already registered on '{type_tag}'")


class InvalidRegistration(InstantiatorError, ValueError):
    """A rule, mode or lifecycle was rejected, or a helper ran outside register()."""


class StartupValidationError(InstantiatorError):
    """One or more declaring types cannot resolve a mode the deployment needs."""

    def __init__(self, report):
        self.report = report
        lines = [f"  {issue.type_tag} [{issue.mode}]: {issue.reason}" for issue in report.issues]
        super().__init__("Startup validation failed:\n" + "\n".join(lines))
