from instantiator.config.settings import InstantiatorSettings, load_settings
from instantiator.config.logger import apply_logging_settings, get_logger

__all__ = ["InstantiatorSettings", "load_settings", "apply_logging_settings", "get_logger"]
