"""Log output for the exports client and its command line."""

import logging
import sys

from nvr_exports.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
QUIET_LOGGERS = ("httpx", "httpcore")


def resolve_level(name: str, debug: bool = False) -> int:
    """Turn a LOG_LEVEL value into a logging level; DEBUG wins when debug is on."""
    if debug:
        return logging.DEBUG
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging() -> None:
    """Send log records to stderr at the configured level."""
    settings = get_settings()

    # stdout is reserved for CLI output
    logging.basicConfig(
        level=resolve_level(settings.log_level, settings.debug),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    # Request lines from the HTTP stack only at WARNING and above
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
