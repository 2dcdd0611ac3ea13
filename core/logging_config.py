"""Logging setup for the core modules.

User-facing output goes through click; this only configures the
diagnostics logged under the 'core' package.
"""

import logging
import sys


def setup_logging(level: str = "WARNING", logger_name: str = "core"):
    """Configure the package logger with a single stderr handler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Logger to configure (all core modules log beneath it)
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    formatter = logging.Formatter(
        '%(asctime)s %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    package_logger = logging.getLogger(logger_name)
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)
