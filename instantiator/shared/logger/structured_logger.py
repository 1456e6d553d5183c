import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

import structlog

ROOT_LOGGER = "instantiator"
FILE_ROOT_LOGGER = "instantiator.file"

_config_lock = threading.Lock()


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Set the level and JSON file sink for every instantiator logger.

    Level and handlers live on the `instantiator` / `instantiator.file` stdlib
    parents, so loggers created before this call follow it too.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    with _config_lock:
        logging.getLogger(ROOT_LOGGER).setLevel(log_level)

        file_root = logging.getLogger(FILE_ROOT_LOGGER)
        file_root.setLevel(log_level)
        file_root.propagate = False
        for handler in list(file_root.handlers):
            file_root.removeHandler(handler)
            handler.close()

        if log_file:
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(logging.Formatter("%(message)s"))
            file_root.addHandler(fh)
        else:
            # no sink configured: keep records away from logging.lastResort
            file_root.addHandler(logging.NullHandler())


class StructuredLogger:
    """Console + JSON-file logger built on structlog."""

    _logger_cache: Dict[str, "StructuredLogger"] = {}
    _cache_lock = threading.Lock()

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",     # cyan
        "INFO": "\033[32m",      # green
        "WARNING": "\033[33m",   # yellow
        "ERROR": "\033[31m",     # red
        "CRITICAL": "\033[1;31m" # bold red
    }
    RESET_COLOR = "\033[0m"

    def __init__(self, name: str = "instantiator", context: Optional[dict] = None):
        self.name = name
        self.context = context or {}

        # ----------------------------
        # Console processor
        # ----------------------------
        def console_processor(logger, method_name, event_dict):
            ts = event_dict.pop("timestamp", None) or datetime.now(timezone.utc).isoformat()
            lvl = event_dict.pop("level", method_name).upper()
            logger_name = event_dict.pop("logger", self.name)
            msg = event_dict.pop("event", "")
            fields = " ".join(f"{k}={v}" for k, v in event_dict.items())
            color = self.LEVEL_COLORS.get(lvl, "")
            return f"{color}{ts} [{logger_name}] {lvl}: {msg} {fields}".rstrip() + self.RESET_COLOR

        # ----------------------------
        # Console logger
        # ----------------------------
        console_logger = logging.getLogger(f"{ROOT_LOGGER}.{name}")
        if not console_logger.handlers:
            ch = logging.StreamHandler()
            ch.setFormatter(logging.Formatter("%(message)s"))
            console_logger.addHandler(ch)

        self.console_logger = structlog.wrap_logger(
            console_logger,
            processors=[
                structlog.processors.TimeStamper(fmt="ISO"),
                structlog.stdlib.add_log_level,
                structlog.processors.format_exc_info,
                console_processor,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
        ).bind(logger=name, **self.context)

        # ----------------------------
        # File logger (JSON)
        # ----------------------------
        self.file_logger = structlog.wrap_logger(
            logging.getLogger(f"{FILE_ROOT_LOGGER}.{name}"),
            processors=[
                structlog.processors.TimeStamper(fmt="ISO"),
                structlog.stdlib.add_log_level,
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
        ).bind(logger=name, **self.context)

    # ----------------------------
    # Logging methods
    # ----------------------------
    def _emit(self, method: str, msg: str, **extra):
        getattr(self.console_logger, method)(msg, **extra)
        getattr(self.file_logger, method)(msg, **extra)

    def debug(self, msg: str, **extra):
        self._emit("debug", msg, **extra)

    def info(self, msg: str, **extra):
        self._emit("info", msg, **extra)

    def warning(self, msg: str, **extra):
        self._emit("warning", msg, **extra)

    def error(self, msg: str, **extra):
        self._emit("error", msg, **extra)


def create_logger(name: str) -> StructuredLogger:
    """Return the cached logger for `name`, creating it on first use."""
    with StructuredLogger._cache_lock:
        logger = StructuredLogger._logger_cache.get(name)
        if logger is None:
            logger = StructuredLogger(name=name)
            StructuredLogger._logger_cache[name] = logger
        return logger


configure_logging()
