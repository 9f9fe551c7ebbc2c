"""Logging setup for the wk command line.

Engine modules only ever do::

    import logging
    log = logging.getLogger(__name__)

and log at DEBUG (section grouping, skipped drafts, walk skips) or WARNING
(ignored config files). Nothing is printed until :func:`configure_logging`
attaches a stderr handler to the ``kbwiki`` logger, which the CLI entry point
does once.

KBWIKI_LOG_LEVEL selects the level (DEBUG, INFO, WARNING, ERROR; default
INFO). ``wk --quiet`` or KBWIKI_QUIET lowers the output to errors only.
"""

import logging
import os
import sys

PACKAGE_LOGGER = "kbwiki"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _level_from_env(default: int = logging.INFO) -> int:
    name = os.environ.get("KBWIKI_LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def configure_logging(level: int | None = None) -> None:
    """Attach the stderr handler to the package logger.

    Args:
        level: Explicit level; defaults to KBWIKI_LOG_LEVEL, then INFO.

    Calling it again is a no-op once a handler is installed.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return

    if level is None:
        level = _level_from_env()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    # The root logger may have its own handlers (pytest, embedding apps)
    package_logger.propagate = False


def set_quiet_mode(quiet: bool) -> None:
    """Show only errors when ``quiet`` is set, otherwise INFO and above."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.ERROR if quiet else logging.INFO
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)
