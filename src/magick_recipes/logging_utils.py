"""
Centralized logging utilities for the magick-recipes commands.

Defines a shared logger instance and setup function so every recipe,
the runtime helpers, and the catalog sync report through the same
handler. Centralization also avoids circular imports between the CLI
and the runtime package.
"""

import logging

LOGGER_NAME = "magick_recipes"


def setup_logger(
        name: str = __name__,
        level: int = logging.INFO,
        formatter: logging.Formatter | None = None,
        handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Configure a logger with optional custom formatting and handler.

    Creates a module-level logger with sensible defaults for level and
    formatting. Custom handlers and formatters can be supplied if
    needed. The default handler writes to stderr so recipe output and
    usage text on stdout stay clean.

    Args:
        name: Logger name, typically set to __name__.
        level: Logging level (e.g., logging.INFO, logging.DEBUG).
        formatter: Optional custom formatter.
        handler: Optional custom handler.

    Returns:
        A configured logger instance.

    """
    logger_instance = logging.getLogger(name)
    logger_instance.setLevel(level)
    if not logger_instance.handlers:
        if formatter is None:
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s")
        if handler is None:
            handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger_instance.addHandler(handler)
        logger_instance.propagate = False
    return logger_instance


def set_level(level: int | str) -> None:
    """Change the shared logger's level, accepting names like ``"DEBUG"``."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)


# Shared logger used across modules
logger = setup_logger(LOGGER_NAME)
