"""
Error Handler Module

This module provides a centralized error handling system that:
1. Logs errors with their stack trace
2. Provides a consistent error reporting pattern for the command-line tools
"""

import traceback
import logging

logger = logging.getLogger("timeslice.error_handler")


class ErrorHandler:
    """Centralized error handling for the timeline tools."""

    @staticmethod
    def log_exception(e: Exception, context: str = "") -> str:
        """Log an exception with stack trace."""
        error_type = type(e).__name__
        error_msg = str(e)

        if context:
            logger.error(f"{context}: {error_type}: {error_msg}")
        else:
            logger.error(f"{error_type}: {error_msg}")

        logger.debug("".join(traceback.format_exception(e)))

        return f"{error_type}: {error_msg}"

    @staticmethod
    def show_warning(message: str, title: str = "Warning") -> None:
        """Log a warning message."""
        logger.warning(f"[{title}] {message}")

    @staticmethod
    def show_info(message: str, title: str = "Info") -> None:
        """Log an info message."""
        logger.info(f"[{title}] {message}")
