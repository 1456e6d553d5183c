from instantiator.shared.logger.structured_logger import StructuredLogger, configure_logging, create_logger

__all__ = ["StructuredLogger", "configure_logging", "create_logger"]
