"""
Logging Configuration
Sets up the harness logger. Records go to stderr; stdout belongs to the
forwarded process.
"""
import logging
import sys

LOGGER_NAME = "pipeline_harness"

LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def level_for(debug_level: int) -> int:
    return LEVELS.get(debug_level, logging.DEBUG if debug_level > 1 else logging.WARNING)


def setup_logging(level: int = logging.WARNING) -> logging.Logger:
    """
    Configures the 'pipeline_harness' logger.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate handlers when main() runs more than once in a process
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('pipeline-test: %(levelname)s: %(message)s'))
    logger.addHandler(handler)

    return logger
