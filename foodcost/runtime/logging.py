"""Logger setup for the ``foodcost`` namespace.

Every module asks for its logger through :func:`get_logger`; the first call
attaches a single stderr handler to the namespace logger. ``FOODCOST_LOG_LEVEL``
picks the starting level (a name such as ``debug`` or a number such as ``10``).
DEBUG output adds timestamps and line numbers.
"""

import logging
import os
import sys

LOGGER_NAMESPACE = "foodcost"
LEVEL_ENV_VAR = "FOODCOST_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"

_HANDLER_NAME = "foodcost-stderr"
_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def level_from_env(default: int = DEFAULT_LOG_LEVEL) -> int:
    """Level requested through ``FOODCOST_LOG_LEVEL``; unknown values give ``default``."""
    raw = os.environ.get(LEVEL_ENV_VAR, "").strip()
    if raw.isdigit():
        return int(raw)
    return _LEVEL_NAMES.get(raw.upper(), default)


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def _namespace_handler(root: logging.Logger) -> logging.Handler | None:
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            return handler
    return None


def configure_logging(level: int | None = None) -> None:
    """Attach the stderr handler to the namespace logger if it is not there yet."""
    root = logging.getLogger(LOGGER_NAMESPACE)
    if _namespace_handler(root) is not None:
        return

    if level is None:
        level = level_from_env()

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(_formatter_for(level))

    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, nested under the namespace unless it already is."""
    configure_logging()
    if name != LOGGER_NAMESPACE and not name.startswith(LOGGER_NAMESPACE + "."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Change the namespace level at runtime; the handler format follows it."""
    configure_logging(level)
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(level)
    handler = _namespace_handler(root)
    if handler is not None:
        handler.setFormatter(_formatter_for(level))
