"""
Centralized logging configuration for TenderSecure.

Subsystem loggers live under the `tendersecure.` namespace (phase, registry,
settlement, host, ledger, storage.*). Console output is colored with
colorlog; a plain file log under the configured log_dir is optional.

Host calls log through a `CallLogAdapter` so every line carries the message
name and the abbreviated caller, e.g. `[enter by 0x0a0a0a0a...] reverted`.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog

ROOT_NAME = "tendersecure"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


class _StderrHandler(colorlog.StreamHandler):
    """Console handler bound to whatever sys.stderr is at emit time."""

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        # Always follows sys.stderr (CLI runners swap it per invocation)
        pass


class TenderLogger:
    """Owns the handlers attached to the `tendersecure` logger tree"""

    _initialized = False
    _log_file: Optional[Path] = None

    @classmethod
    def setup(cls, level: int = logging.INFO, log_file: Optional[Path] = None):
        """
        (Re)configure the `tendersecure` logger tree.

        Safe to call repeatedly: existing handlers are replaced.

        Args:
            level: Logging level for the tree and its handlers
            log_file: Also write plain-text records here when given
        """
        root_logger = logging.getLogger(ROOT_NAME)
        root_logger.setLevel(level)
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        console_handler = _StderrHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s" + LOG_FORMAT.replace(" %(message)s", "%(reset)s %(message)s"),
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
        ))
        root_logger.addHandler(console_handler)

        if log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            root_logger.addHandler(file_handler)

        cls._log_file = log_file
        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Subsystem name (e.g., 'registry', 'settlement', 'host')

        Returns:
            Logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"{ROOT_NAME}.{name}")


class CallLogAdapter(logging.LoggerAdapter):
    """Prefixes records with the dispatched message and its caller."""

    def process(self, msg, kwargs):
        return f"[{self.extra['message']} by {self.extra['caller']}] {msg}", kwargs


# Convenience functions
def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return TenderLogger.get_logger(name)


def get_call_logger(name: str, message: str, caller: str) -> CallLogAdapter:
    """Subsystem logger scoped to one contract call."""
    return CallLogAdapter(get_logger(name), {"message": message, "caller": caller})


def configure_logging(config, debug: bool = False) -> None:
    """
    Apply the logging section of a TenderConfig.

    Args:
        config: TenderConfig (log_level, log_to_file, log_dir)
        debug: Force DEBUG regardless of config.log_level
    """
    level = logging.DEBUG if debug else getattr(logging, config.log_level)
    log_file = Path(config.log_dir) / "tender.log" if config.log_to_file else None
    TenderLogger.setup(level=level, log_file=log_file)
