"""
Logging utilities for the invoice generator.

logger(__file__) names loggers after their module inside the package
(invoice_gen.services.sink, invoice_gen.app, ...) and attaches one stream
handler at the level set by config.LOG_LEVEL.
"""

import logging
from pathlib import Path

from invoice_gen import config

_PACKAGE = "invoice_gen"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _module_name(path: str) -> str:
    """Return the dotted module name for a source file path."""
    parts = Path(path).with_suffix("").parts
    if parts and parts[-1] == "__init__":
        parts = parts[:-1]
    if _PACKAGE in parts:
        parts = parts[len(parts) - parts[::-1].index(_PACKAGE) - 1 :]
        return ".".join(parts)
    return f"{_PACKAGE}.{Path(path).stem}"


def logger(name: str) -> logging.Logger:
    """
    Return a configured logger.

    Args:
        name: Logger name or a __file__ path.
    """
    if "/" in name or "\\" in name:
        name = _module_name(name)

    log = logging.getLogger(name)
    if not log.handlers:
        log.setLevel(_level(config.LOG_LEVEL))
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        log.addHandler(handler)
    return log
