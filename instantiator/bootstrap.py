"""
Application entry-point wiring: apply InstantiatorSettings to a context.

    from instantiator.bootstrap import configure
    configure()                           # env / .env / INSTANTIATOR_CONFIG
    configure(InstantiatorSettings(default_mode="test"))
"""

from typing import Optional

from instantiator.config.logger import apply_logging_settings, get_logger
from instantiator.config.settings import InstantiatorSettings, load_settings
from instantiator.shared.context import InstantiatorContext, get_context


def configure(settings: Optional[InstantiatorSettings] = None,
              context: Optional[InstantiatorContext] = None) -> InstantiatorContext:
    """Seed logging, the global mode/fallback and registration policy from settings."""
    settings = settings or load_settings()
    apply_logging_settings(settings)
    context = context or get_context()
    logger = get_logger("Bootstrap")

    context.global_state.set_global_mode(settings.default_mode)
    context.global_state.set_global_fallback(settings.default_fallback)

    context.strict_registration = settings.strict_registration
    for registry in context.registries():
        registry.strict = settings.strict_registration

    logger.info(
        "Instantiator context configured",
        mode=settings.default_mode,
        fallback=settings.default_fallback,
        strict_registration=settings.strict_registration,
    )
    return context
