"""
Startup check that every declaring type can serve every mode a deployment uses.

Missing modes otherwise only surface as ModeNotRegistered on the first request
that needs them. Run validate_modes() from the entry point, after bootstrap and
before serving traffic:

    report = validate_modes(["default", "test"], instantiators=[DatabaseInstantiator])
    report.raise_for_issues()
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Type

from pydantic import BaseModel, Field

from instantiator.shared.context import InstantiatorContext, get_context
from instantiator.shared.errors import StartupValidationError
from instantiator.shared.instantiator import Instantiator
from instantiator.shared.logger import create_logger


class ValidationIssue(BaseModel):
    type_tag: str
    mode: str
    reason: str


class ResolvedMode(BaseModel):
    type_tag: str
    mode: str
    resolved_mode: str


class ValidationReport(BaseModel):
    modes: List[str] = Field(default_factory=list)
    resolved: List[ResolvedMode] = Field(default_factory=list)
    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def raise_for_issues(self) -> "ValidationReport":
        if self.issues:
            raise StartupValidationError(self)
        return self


class RuleArguments(BaseModel):
    """Arguments used to build an object when validate_modes(construct=True)."""

    args: tuple = ()
    kwargs: Dict[str, Any] = Field(default_factory=dict)


def validate_modes(
    modes: Iterable[str],
    instantiators: Iterable[Type[Instantiator]] = (),
    fallback: Optional[bool] = None,
    construct: bool = False,
    arguments: Optional[Mapping[str, RuleArguments]] = None,
    context: Optional[InstantiatorContext] = None,
) -> ValidationReport:
    """
    Check every given instantiator type and every already-registered declaring
    type under each of `modes`.

    `fallback` defaults to the context's global fallback. With `construct=True`
    each mode is actually resolved, using `arguments[type_tag]` for the rule's
    arguments, so rules that fail to build are reported too. Singleton rules
    built this way stay cached.
    """
    context = context or get_context()
    logger = create_logger("StartupValidation")
    if fallback is None:
        fallback = context.global_state.get_global_fallback()
    arguments = arguments or {}
    report = ValidationReport(modes=list(modes))

    # constructing one instance runs the type's registration step
    for cls in instantiators:
        try:
            cls(fallback=fallback, context=context)
        except Exception as exc:
            for mode in report.modes:
                report.issues.append(ValidationIssue(
                    type_tag=cls.type_tag(), mode=mode, reason=f"registration failed: {type(exc).__name__}: {exc}"
                ))

    for registry in context.registries():
        if not registry.is_populated:
            continue
        for mode in report.modes:
            resolved = registry.lookup(mode, fallback)
            if resolved is None:
                report.issues.append(ValidationIssue(
                    type_tag=registry.type_tag, mode=mode, reason="mode not registered"
                ))
                continue

            if construct:
                rule_args = arguments.get(registry.type_tag, RuleArguments())
                try:
                    registry.resolve(mode, fallback, *rule_args.args, **rule_args.kwargs)
                except Exception as exc:
                    report.issues.append(ValidationIssue(
                        type_tag=registry.type_tag, mode=mode, reason=f"construction failed: {type(exc).__name__}: {exc}"
                    ))
                    continue

            report.resolved.append(ResolvedMode(type_tag=registry.type_tag, mode=mode, resolved_mode=resolved))

    for issue in report.issues:
        logger.warning("Startup validation issue", type_tag=issue.type_tag, mode=issue.mode, reason=issue.reason)
    logger.info(
        "Startup validation finished",
        modes=report.modes,
        checked=len(report.resolved) + len(report.issues),
        issues=len(report.issues),
    )
    return report
