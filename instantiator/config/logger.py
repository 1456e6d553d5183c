from instantiator.config.settings import InstantiatorSettings
from instantiator.shared.logger import StructuredLogger, configure_logging, create_logger


def apply_logging_settings(settings: InstantiatorSettings) -> None:
    """Route every instantiator logger to the configured level and JSON file."""
    configure_logging(level=settings.log_level, log_file=settings.log_file)


def get_logger(name: str = "instantiator") -> StructuredLogger:
    return create_logger(name)
