import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "WARNING"


def get_text_encoding() -> str:
    return os.getenv("SHPKIT_ENCODING", DEFAULT_ENCODING)


def get_log_level() -> str:
    """Return ``SHPKIT_LOG_LEVEL`` upper-cased, or the default when it names no logging level."""
    level = os.getenv("SHPKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Ignoring unknown SHPKIT_LOG_LEVEL %r, using %s", level, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level
